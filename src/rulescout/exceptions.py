# Custom exceptions for rulescout

class RulescoutError(Exception):
    """Base exception for all application-specific errors."""
    pass

class ParseError(RulescoutError):
    """Raised when a corpus file cannot be decoded, tokenized or parsed."""
    def __init__(self, file_path: str, message: str):
        self.file_path = file_path
        self.message = message
        super().__init__(
            f"Automatic configuration failed. No usable corpus: could not parse {file_path}: {message}"
        )

class EmptyCorpusError(RulescoutError):
    """Raised when the given patterns resolve to no files at all."""
    def __init__(self, patterns: list):
        self.patterns = list(patterns)
        shown = " ".join(self.patterns) if self.patterns else "(none)"
        super().__init__(
            f"Automatic configuration failed. No files matched the patterns: {shown}"
        )

class DiscoveryCancelled(RulescoutError):
    """Raised when a cancellation token fires between trials."""
    def __init__(self, reason: str = "cancelled", completed_trials: int = 0):
        self.reason = reason
        self.completed_trials = completed_trials
        super().__init__(
            f"Discovery {reason} after {completed_trials} completed trial(s)."
        )

class ConfigError(RulescoutError):
    """Raised for configuration-related problems."""
    pass
