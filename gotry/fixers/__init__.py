"""Go source rewriters and the safe file writes they share."""

from .common import write_with_backup
from .try_rewrite import rewrite_assign, rewrite_candidate
