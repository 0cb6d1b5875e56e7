from eth_account.signers.local import LocalAccount
from eth_typing import ChecksumAddress

type BlockNumber = int

# An unlocked account managed by the node, or a local account holding its own key
type Signer = ChecksumAddress | LocalAccount
