"""Models for normalized image payloads."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class NormalizedImage:
    """Size- and dimension-bounded image encoded as a self-describing data URL."""

    data_url: str
    width: int
    height: int
    quality: float

    @property
    def mime_type(self) -> str:
        """MIME type embedded in the data URL."""
        header = self.data_url.split(",", 1)[0]
        return header.removeprefix("data:").split(";", 1)[0]

    def __len__(self) -> int:
        return len(self.data_url)


@dataclass(frozen=True)
class ImageFailure:
    """A file that could not be normalized, with the message shown to the user."""

    filename: str
    message: str


@dataclass
class ImageBatchResult:
    """Per-file outcome of normalizing several files one after another."""

    images: list[NormalizedImage] = field(default_factory=list)
    failures: list[ImageFailure] = field(default_factory=list)

    @property
    def data_urls(self) -> list[str]:
        """Encoded payloads of the successful files, in input order."""
        return [image.data_url for image in self.images]
