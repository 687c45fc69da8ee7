"""BasicNft — a minimal ERC-721 collection where anyone can mint."""

from __future__ import annotations

from dataclasses import dataclass, field

from nftmarketplace.contracts.base import LocalContract, Message, external, view
from nftmarketplace.core.errors import RevertedWithReason
from nftmarketplace.core.units import ZERO_ADDRESS

TOKEN_URI = (
    "ipfs://bafybeig37ioir76s7mg5oobetncojcm3c3hxasyd4rvid4jqhy4gkaheg4/"
    "?filename=0-PUG.json"
)


@dataclass
class BasicNftStorage:
    token_counter: int = 0
    owners: dict[int, str] = field(default_factory=dict)
    balances: dict[str, int] = field(default_factory=dict)
    token_approvals: dict[int, str] = field(default_factory=dict)
    operator_approvals: dict[tuple[str, str], bool] = field(default_factory=dict)


class BasicNft(LocalContract):
    contract_name = "BasicNft"
    name = "Dogie"
    symbol = "DOG"

    def initial_storage(self) -> BasicNftStorage:
        return BasicNftStorage()

    # -- Minting ------------------------------------------------------------

    @external("mintNft", gas=70_000)
    def mint_nft(self, msg: Message) -> int:
        token_id = self.storage.token_counter
        self._mint(msg.sender, token_id)
        self.emit("DogMinted", tokenId=token_id)
        self.storage.token_counter += 1
        return token_id

    # -- Approvals ------------------------------------------------------------

    @external("approve", gas=25_000)
    def approve(self, msg: Message, to: str, token_id: int) -> None:
        to = self.addr(to)
        owner = self._require_owner_of(token_id)
        if to == owner:
            raise RevertedWithReason("ERC721: approval to current owner")
        if msg.sender != owner and not self._is_operator(owner, msg.sender):
            raise RevertedWithReason(
                "ERC721: approve caller is not token owner or approved for all"
            )
        self.storage.token_approvals[token_id] = to
        self.emit("Approval", owner=owner, approved=to, tokenId=token_id)

    @external("setApprovalForAll", gas=25_000)
    def set_approval_for_all(self, msg: Message, operator: str, approved: bool) -> None:
        operator = self.addr(operator)
        if operator == msg.sender:
            raise RevertedWithReason("ERC721: approve to caller")
        self.storage.operator_approvals[(msg.sender, operator)] = bool(approved)
        self.emit("ApprovalForAll", owner=msg.sender, operator=operator, approved=bool(approved))

    @view("getApproved")
    def get_approved(self, msg: Message, token_id: int) -> str:
        self._require_owner_of(token_id)
        return self.storage.token_approvals.get(token_id, ZERO_ADDRESS)

    @view("isApprovedForAll")
    def is_approved_for_all(self, msg: Message, owner: str, operator: str) -> bool:
        return self._is_operator(self.addr(owner), self.addr(operator))

    # -- Transfers ------------------------------------------------------------

    @external("transferFrom", gas=40_000)
    def transfer_from(self, msg: Message, from_: str, to: str, token_id: int) -> None:
        self._transfer_checked(msg.sender, self.addr(from_), self.addr(to), token_id)

    @external("safeTransferFrom", gas=45_000)
    def safe_transfer_from(self, msg: Message, from_: str, to: str, token_id: int) -> None:
        to = self.addr(to)
        self._transfer_checked(msg.sender, self.addr(from_), to, token_id)
        if self.chain.is_contract(to) and not self.chain.accepts_tokens(to):
            raise RevertedWithReason("ERC721: transfer to non ERC721Receiver implementer")

    # -- Views ----------------------------------------------------------------

    @view("ownerOf")
    def owner_of(self, msg: Message, token_id: int) -> str:
        return self._require_owner_of(token_id)

    @view("balanceOf")
    def balance_of(self, msg: Message, owner: str) -> int:
        owner = self.addr(owner)
        if owner == ZERO_ADDRESS:
            raise RevertedWithReason("ERC721: address zero is not a valid owner")
        return self.storage.balances.get(owner, 0)

    @view("tokenURI")
    def token_uri(self, msg: Message, token_id: int) -> str:
        self._require_owner_of(token_id)
        return TOKEN_URI

    @view("getTokenCounter")
    def get_token_counter(self, msg: Message) -> int:
        return self.storage.token_counter

    # -- Internals --------------------------------------------------------------

    def _mint(self, to: str, token_id: int) -> None:
        if token_id in self.storage.owners:
            raise RevertedWithReason("ERC721: token already minted")
        self.storage.owners[token_id] = to
        self.storage.balances[to] = self.storage.balances.get(to, 0) + 1
        self.emit("Transfer", **{"from": ZERO_ADDRESS, "to": to, "tokenId": token_id})

    def _require_owner_of(self, token_id: int) -> str:
        owner = self.storage.owners.get(token_id)
        if owner is None:
            raise RevertedWithReason("ERC721: invalid token ID")
        return owner

    def _is_operator(self, owner: str, operator: str) -> bool:
        return self.storage.operator_approvals.get((owner, operator), False)

    def _transfer_checked(self, spender: str, from_: str, to: str, token_id: int) -> None:
        owner = self._require_owner_of(token_id)
        approved = self.storage.token_approvals.get(token_id)
        if spender != owner and spender != approved and not self._is_operator(owner, spender):
            raise RevertedWithReason("ERC721: caller is not token owner or approved")
        if owner != from_:
            raise RevertedWithReason("ERC721: transfer from incorrect owner")
        if to == ZERO_ADDRESS:
            raise RevertedWithReason("ERC721: transfer to the zero address")

        self.storage.token_approvals.pop(token_id, None)
        self.storage.balances[from_] -= 1
        self.storage.balances[to] = self.storage.balances.get(to, 0) + 1
        self.storage.owners[token_id] = to
        self.emit("Transfer", **{"from": from_, "to": to, "tokenId": token_id})
