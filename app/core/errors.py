class ContentWorkflowError(Exception):
    """Base class for errors the service layer raises to callers."""


class NotFoundError(ContentWorkflowError):
    def __init__(self, kind: str, entity_id: str):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind} with ID {entity_id} not found")


class BadRequestError(ContentWorkflowError):
    pass


class AiProviderError(ContentWorkflowError):
    """A generate/translate call could not be served by the requested provider."""
