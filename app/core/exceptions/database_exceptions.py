class DuplicateKeyError(Exception):
    """An insert collided with a unique constraint."""

    def __init__(self, resource: str, detail: str = ''):
        self.resource = resource
        self.detail = detail
        super().__init__(f'Duplicate {resource}: {detail}' if detail else resource)
