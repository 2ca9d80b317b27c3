# -*- coding: utf-8 -*-
# Test package for lbc_contracts (market, token and contract stdlib).
