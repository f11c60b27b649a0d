import uuid

from pydantic import BaseModel


def short_id() -> str:
    """First 8 hex characters of a fresh UUID4."""
    return str(uuid.uuid4())[:8]


class SmokeResourceNames(BaseModel):
    """Names of the server-side resources created by one smoke run.

    Every run uses fresh names so repeated runs never collide with an index
    or design document that is still being built.
    """

    run_id: str
    search_index: str
    design_doc: str
    view: str

    model_config = {"frozen": True}

    @classmethod
    def generate(cls) -> "SmokeResourceNames":
        return cls(
            run_id=short_id(),
            search_index=f"idx-{short_id()}",
            design_doc=f"dd-{short_id()}",
            view=f"view-{short_id()}",
        )
