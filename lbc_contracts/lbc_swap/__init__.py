"""LBC swap: bonding-curve market minting MITHRIL on deposit and burning it on redeem."""

MODULE = "lbc_contracts.lbc_swap.contract"
