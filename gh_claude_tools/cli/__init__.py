from .main import ghc, ghcheck, ghcp, ghn, ghp, ghpa

__all__ = ["ghc", "ghcheck", "ghcp", "ghn", "ghp", "ghpa"]
