"""Result pages produced by the discovery services before response mapping."""

from dataclasses import dataclass, field

from app.schemas.episodes import Episode
from app.schemas.podcasts import Podcast


@dataclass
class PodcastPage:
    """Ranked podcasts plus the total the endpoint reports for them."""

    items: list[Podcast]
    total: int


@dataclass
class EpisodePage:
    items: list[Episode]
    total: int


@dataclass
class SearchPage:
    podcasts: list[Podcast] = field(default_factory=list)
    episodes: list[Episode] = field(default_factory=list)
