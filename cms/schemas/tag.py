from cms.schemas.common import CamelModel, NonEmptyStr


class TagCreate(CamelModel):
    name: NonEmptyStr


class TagUpdate(CamelModel):
    name: NonEmptyStr


class TagResponse(CamelModel):
    id: int
    name: str
    slug: str
    usage_count: int
