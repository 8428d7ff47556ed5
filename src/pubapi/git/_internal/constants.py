"""Internal pygit2 constants - keeps trivia out of public modules."""

from __future__ import annotations

from pygit2.enums import CheckoutStrategy, FileStatus

# Checkout strategies
CHECKOUT_SAFE = CheckoutStrategy.SAFE
CHECKOUT_FORCE = CheckoutStrategy.FORCE

# Status flags that do not count as a local change
STATUS_UNCHANGED = FileStatus.CURRENT | FileStatus.IGNORED
