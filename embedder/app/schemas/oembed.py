from pydantic import BaseModel, Field


class EmbedRequest(BaseModel):
    text: str
    base_url: str | None = None


class EmbedResponse(BaseModel):
    html: str


class OembedNotFound(BaseModel):
    url: str
    detail: str = Field(default="No oEmbed response available for this url")
