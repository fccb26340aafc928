# Service layer for accounts: identity, provisioning and the year ledger.
