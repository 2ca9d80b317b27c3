"""Reserve-backed token issued by the LBC swap market (``contract`` is the deployable module)."""

MODULE = "lbc_contracts.reserve_token.contract"
