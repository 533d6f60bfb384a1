"""Provider bootstrap (import side-effect)."""
from .api import set_provider
from .bootstrap import build_provider

set_provider(build_provider())
