"""nbngcli - unified Google CLI (Gmail, Calendar, Drive)."""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _version

try:
    __version__ = _version("nbngcli")
except PackageNotFoundError:
    __version__ = "0.0.0"
