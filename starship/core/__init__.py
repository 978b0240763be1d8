"""
Core infrastructure layer for Starship Commander.

- Configuration (Config)
- Logging (structured logging, logger factory, LogContext)
- Database subsystem (DatabaseService, unit of work, ORM base)
- Validation utilities (InputValidator)
- Infrastructure exceptions and the ErrorKind tag
- Service composition (ServiceContainer, ErrorResponseService)
"""
