class RecordNotFound(ValueError):
    """Raised when a role, staff member, project or assignment id does not exist."""

    def __init__(self, kind, record_id=None, message=None):
        self.kind = kind
        self.record_id = record_id
        if message is None:
            message = f"{kind} not found: {record_id}" if record_id is not None else f"{kind} not found"
        super().__init__(message)
