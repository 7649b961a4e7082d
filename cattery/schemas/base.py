"""Schema base — camelCase JSON, snake_case Python, reads domain records by attribute."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# Largest value an Integer column holds (PostgreSQL int4); bigger ids are
# rejected at the boundary instead of overflowing in the driver.
MAX_ID = 2_147_483_647
