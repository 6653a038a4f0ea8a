"""Static reward catalog.

Rewards are configuration, not rows: the catalog is loaded once at import,
is read-only, and is kept in ascending level order for presentation.
"""

from dataclasses import asdict, dataclass
from types import MappingProxyType


@dataclass(frozen=True)
class Reward:
    """A level-gated reward users can claim once."""

    id: str
    name: str
    description: str
    level: int
    logo: str
    category: str

    def to_dict(self) -> dict:
        return asdict(self)


_REWARDS = [
    Reward(
        id="focus_app_1m",
        name="Focus App Subscription",
        description="1-month subscription to a leading focus and meditation app.",
        level=5,
        logo="SelfImprovement",
        category="Productivity",
    ),
    Reward(
        id="spotify_3m",
        name="Spotify Premium",
        description="3-month subscription for ad-free music.",
        level=10,
        logo="MusicNote",
        category="Entertainment",
    ),
    Reward(
        id="game_gift_card_10",
        name="$10 Game Gift Card",
        description="A $10 gift card for Steam or Roblox.",
        level=15,
        logo="SportsEsports",
        category="Gaming",
    ),
    Reward(
        id="youtube_premium_3m",
        name="YouTube Premium",
        description="3-month subscription for ad-free videos and music.",
        level=20,
        logo="PlayCircle",
        category="Entertainment",
    ),
    Reward(
        id="learning_platform_1m",
        name="Skillshare Subscription",
        description="1-month subscription to an online learning platform.",
        level=25,
        logo="School",
        category="Education",
    ),
    Reward(
        id="food_delivery_25",
        name="$25 Food Delivery",
        description="A $25 gift card for Uber Eats or DoorDash.",
        level=30,
        logo="Fastfood",
        category="Lifestyle",
    ),
    Reward(
        id="digital_planner_pack",
        name="Digital Planner Pack",
        description="High-quality digital notebook and planner templates.",
        level=40,
        logo="Book",
        category="Productivity",
    ),
    Reward(
        id="streaming_service_6m",
        name="Netflix Subscription",
        description="6-month subscription to a video streaming service.",
        level=50,
        logo="Theaters",
        category="Entertainment",
    ),
    Reward(
        id="amazon_gift_card_50",
        name="$50 Amazon Gift Card",
        description="A $50 gift card for anything on Amazon.",
        level=75,
        logo="CardGiftcard",
        category="Shopping",
    ),
    Reward(
        id="noise_cancelling_headphones",
        name="Noise-Cancelling Headphones",
        description="A pair of Anker Soundcore noise-cancelling headphones.",
        level=100,
        logo="Headphones",
        category="Hardware",
    ),
]

REWARD_CATALOG: tuple[Reward, ...] = tuple(sorted(_REWARDS, key=lambda r: r.level))
REWARDS_BY_ID = MappingProxyType({reward.id: reward for reward in REWARD_CATALOG})


def get_reward(reward_id: str) -> Reward | None:
    """Look up a catalog entry by id."""
    return REWARDS_BY_ID.get(reward_id)
