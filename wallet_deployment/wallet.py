from collections import OrderedDict
from typing import Any, List, NamedTuple

from ape.utils import ZERO_ADDRESS
from eth_utils import is_address, to_checksum_address

from wallet_deployment.constants import WALLET_OWNERS_PARAMETER, WALLET_REQUIRED_PARAMETER


class WalletParameters(NamedTuple):
    """
    Owners and confirmation threshold of a multi-signature wallet.

    The checks in `validate` reproduce the requirement enforced by the wallet
    constructor (at least one owner, 0 < required <= number of owners) plus
    the owner sanity checks the contract applies when adding owners, so that
    a bad configuration fails before any transaction is sent.
    """

    owners: List[Any]
    required: Any

    class Invalid(Exception):
        """Raised when the wallet parameters would be rejected by the wallet"""

    @classmethod
    def from_resolved_params(cls, resolved_params: OrderedDict) -> "WalletParameters":
        """Builds wallet parameters from resolved constructor parameters."""
        try:
            owners = resolved_params[WALLET_OWNERS_PARAMETER]
            required = resolved_params[WALLET_REQUIRED_PARAMETER]
        except KeyError as e:
            raise cls.Invalid(f"Missing wallet constructor parameter {e}")
        return cls(owners=owners, required=required)

    def validate(self) -> "WalletParameters":
        """Returns a copy with checksummed owners; raises Invalid on failure."""
        if not isinstance(self.owners, (list, tuple)) or len(self.owners) == 0:
            raise self.Invalid("At least one owner is required")

        checksum_owners = list()
        seen = set()
        for position, owner in enumerate(self.owners):
            if not isinstance(owner, str) or not is_address(owner):
                raise self.Invalid(f"Owner at position {position} is not an address: '{owner}'")
            if owner.lower() == ZERO_ADDRESS.lower():
                raise self.Invalid(f"Owner at position {position} is the zero address")
            if owner.lower() in seen:
                raise self.Invalid(f"Duplicate owner {owner} at position {position}")
            seen.add(owner.lower())
            checksum_owners.append(to_checksum_address(owner))

        # bool is an int subclass, but never a meaningful threshold
        if not isinstance(self.required, int) or isinstance(self.required, bool):
            raise self.Invalid(f"Required confirmations must be an integer, got '{self.required}'")
        if self.required < 1:
            raise self.Invalid("Required confirmations must be at least 1")
        if self.required > len(checksum_owners):
            raise self.Invalid(
                f"Required confirmations ({self.required}) exceeds "
                f"the number of owners ({len(checksum_owners)})"
            )

        return WalletParameters(owners=checksum_owners, required=self.required)
