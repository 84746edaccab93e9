"""gitclone - Clone git repositories into an organized source tree with live progress."""

from gitclone.cloner import GitCloner
from gitclone.location import parse_location
from gitclone.models.location import ParseDiagnostic, RepositoryIdentity

__version__ = "0.1.0"
__all__ = ["GitCloner", "ParseDiagnostic", "RepositoryIdentity", "parse_location"]
