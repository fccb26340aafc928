"""Domain errors raised by the gate pass services."""


class QueryError(Exception):
    """A department query tier failed at the store level.

    `stage` names the tier; `failures` holds every (stage, message) pair
    tried before giving up.
    """

    def __init__(self, stage: str, message: str, failures=None):
        super().__init__(f'{stage}: {message}')
        self.stage = stage
        self.message = message
        self.failures = list(failures or [(stage, message)])


class CredentialGenerationError(Exception):
    """Encoding or uploading the credential failed; the pass was not changed."""

    def __init__(self, pass_id, stage: str, message: str):
        super().__init__(f'QR code generation failed for pass {pass_id} ({stage}): {message}')
        self.pass_id = pass_id
        self.stage = stage
        self.message = message
