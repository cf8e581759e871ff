"""
Approval Registry Module.

Manager-controlled publication flags keyed by normalized review id.
"""
