# schemas.py

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, create_model


class CMSRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str


def cms_schema(typename: str) -> type[CMSRecord]:
    """Base model for a CMS record of the given ``__typename``.

    Subclass the result to declare the component's own fields::

        class HeroRecord(cms_schema("HeroRecord")):
            title: str
    """
    return create_model(
        f"{typename}Schema",
        __base__=CMSRecord,
        typename=(Literal[typename], Field(alias="__typename")),
    )
