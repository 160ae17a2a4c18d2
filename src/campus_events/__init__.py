"""
# Campus Events API

REST backend for campus clubs and their events, built on FastAPI, Motor (MongoDB) and Pydantic.

## Architecture Overview

```
┌──────────────────────────────────────────────────────────┐
│  routes/        FastAPI routers (events, clubs, users)   │
├──────────────────────────────────────────────────────────┤
│  services/      EventRepository, RegistrationService,    │
│                 AttendanceService, ReminderService, ...  │
├──────────────────────────────────────────────────────────┤
│  managers/      logging, email delivery (aiosmtplib)     │
├──────────────────────────────────────────────────────────┤
│  database/      DatabaseManager (Motor), index catalog   │
└──────────────────────────────────────────────────────────┘
```

The `DatabaseManager` is created by `campus_events.main` and injected into services; no module
holds a connection of its own.
"""

__version__ = "1.0.0"
