"""
punbot — A Pun Point Ledger for Discord
========================================
Watches a shared channel for ``@someone pun point`` and keeps a per-user
tally of points received and points given.  Mention the bot with
``scores`` to get the current standings.

Package layout::

    punbot/
    ├── config.py          # YAML → typed Python config
    ├── constants.py       # Reply texts, welcome banner
    ├── errors.py          # StoreError, DirectoryLookupFailed
    ├── database/
    │   ├── engine.py      # SQLAlchemy engine + async helpers
    │   └── models.py      # punpoints + info tables
    ├── engine/
    │   ├── events.py      # ChatEvent, SessionContext, Action variants
    │   └── classifier.py  # ChatEvent → Action (pure)
    ├── services/
    │   ├── interfaces.py  # DirectoryLookup / ReplyChannel protocols
    │   ├── ledger_service.py  # LedgerStore (atomic counters)
    │   ├── init_gate.py   # First-run detection
    │   └── dispatcher.py  # Action → ledger mutation + replies
    └── bot/
        ├── core.py        # Bot subclass, adapters, startup hook
        └── cogs/
            └── points.py  # on_message → sequential event queue
"""

__version__ = "0.1.0"
