from .account_manager import AccountManager, Lease
