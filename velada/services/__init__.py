"""
velada/services
Stores (repositories) and the voting / winner engines built on them
"""
