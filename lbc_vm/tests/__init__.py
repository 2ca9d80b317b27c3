# Test package for lbc_vm (host runtime and contract stdlib).
