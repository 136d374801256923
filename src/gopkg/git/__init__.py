from .checkout import pin
from .client import GitClient, Vcs

__all__ = ["GitClient", "Vcs", "pin"]
