"""
Game API endpoints.

Exposes the economy operations of the single game session. Refused
operations map to 409 (purchase refused) or 404 (unknown id).
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel, Field

from pixelpack.models.card import CardInstance
from pixelpack.models.game_state import AudioTrack, GameState, SFXType
from pixelpack.models.rarity import CardVariant, Rarity
from pixelpack.services.card_factory import epoch_millis, new_instance_id
from pixelpack.services.economy import EconomyController, SaleResult
from pixelpack.services.valuation import calculate_value

router = APIRouter(prefix="/game", tags=["game"])


def get_economy(request: Request) -> EconomyController:
    """Dependency that provides the session's economy controller."""
    economy: EconomyController = request.app.state.economy
    return economy


Economy = Annotated[EconomyController, Depends(get_economy)]


# --- Models ---


class CardResponse(BaseModel):
    """An owned card instance."""

    instance_id: str
    definition_id: str
    name: str
    theme: str
    rarity: Rarity
    variant: CardVariant
    is_foil: bool
    is_locked: bool
    value: int
    image_id: int
    image_uri: str | None = None
    obtained_at: int

    @classmethod
    def from_card(cls, card: CardInstance) -> "CardResponse":
        return cls(
            instance_id=card.instance_id,
            definition_id=card.definition_id,
            name=card.name,
            theme=card.theme,
            rarity=card.rarity,
            variant=card.variant,
            is_foil=card.is_foil,
            is_locked=card.is_locked,
            value=card.value,
            image_id=card.image_id,
            image_uri=card.image_uri,
            obtained_at=card.obtained_at,
        )


class StatsResponse(BaseModel):
    """Lifetime counters."""

    packs_opened: int
    cards_obtained: int
    total_gold_earned: int
    highest_rarity_found: Rarity | None = None
    battles_won: int
    battles_lost: int


class GameResponse(BaseModel):
    """Progress snapshot of the session."""

    gold: int
    inventory: list[CardResponse] = Field(default_factory=list)
    stats: StatsResponse
    battle_deck: list[str] = Field(default_factory=list)
    coin_events: int = 0


class PackResponse(BaseModel):
    id: str
    name: str
    theme: str
    price: int
    card_count: int
    rarity_weights: dict[Rarity, int]
    description: str = ""


class CosmeticResponse(BaseModel):
    id: str
    name: str
    type: str
    price: int
    purchased: bool


class ConfigResponse(BaseModel):
    """Catalog and presentation settings."""

    card_count: int
    packs: list[PackResponse] = Field(default_factory=list)
    cosmetics: list[CosmeticResponse] = Field(default_factory=list)
    audio_track_ids: list[str] = Field(default_factory=list)
    active_card_back_uri: str | None = None
    active_border_style: str | None = None
    game_logo_uri: str | None = None


class PurchaseResponse(BaseModel):
    """Cards generated by a pack purchase."""

    pack_id: str
    cards: list[CardResponse]
    gold: int


class SaleResponse(BaseModel):
    """Outcome of a sale. Zero sold is not an error."""

    sold_ids: list[str] = Field(default_factory=list)
    gold_earned: int = 0
    gold: int


class SellRequest(BaseModel):
    instance_ids: list[str] = Field(..., description="Cards to sell; locked ones are skipped")


class BattleDeckResponse(BaseModel):
    instance_id: str
    in_deck: bool
    battle_deck: list[str]


class WonCardRequest(BaseModel):
    """A card awarded by a battle. Missing id, timestamp and value are generated."""

    definition_id: str
    name: str
    theme: str = ""
    rarity: Rarity
    variant: CardVariant = CardVariant.STANDARD
    value: int | None = None
    instance_id: str | None = None
    image_id: int = 0
    image_uri: str | None = None
    obtained_at: int | None = None

    def to_card(self) -> CardInstance:
        return CardInstance(
            instance_id=self.instance_id or new_instance_id(),
            definition_id=self.definition_id,
            name=self.name,
            theme=self.theme,
            rarity=self.rarity,
            variant=self.variant,
            value=(
                self.value
                if self.value is not None
                else calculate_value(self.rarity, self.variant)
            ),
            obtained_at=self.obtained_at if self.obtained_at is not None else epoch_millis(),
            image_id=self.image_id,
            image_uri=self.image_uri,
        )


class BattleResultRequest(BaseModel):
    won: bool
    gold_delta: int = Field(..., description="Gold won (positive) or lost (negative)")
    card_won: WonCardRequest | None = None


class ImageUpdateRequest(BaseModel):
    image_uri: str = Field(..., min_length=1)


class SoundUpdateRequest(BaseModel):
    sfx_type: SFXType
    data_uri: str = Field(..., min_length=1)


class AudioTrackRequest(BaseModel):
    id: str
    name: str
    data_uri: str


class StatusResponse(BaseModel):
    ok: bool
    message: str = ""


def _game_response(state: GameState) -> GameResponse:
    stats = state.stats
    return GameResponse(
        gold=state.gold,
        inventory=[CardResponse.from_card(card) for card in state.inventory],
        stats=StatsResponse(
            packs_opened=stats.packs_opened,
            cards_obtained=stats.cards_obtained,
            total_gold_earned=stats.total_gold_earned,
            highest_rarity_found=stats.highest_rarity_found,
            battles_won=stats.battles_won,
            battles_lost=stats.battles_lost,
        ),
        battle_deck=list(state.battle_deck),
        coin_events=state.coin_events,
    )


def _sale_response(result: SaleResult, gold: int) -> SaleResponse:
    return SaleResponse(
        sold_ids=[card.instance_id for card in result.sold],
        gold_earned=result.gold_earned,
        gold=gold,
    )


# --- Progress endpoints ---


@router.get("", response_model=GameResponse)
async def get_game(economy: Economy) -> GameResponse:
    """Wallet, inventory, stats and battle deck."""
    return _game_response(economy.state)


@router.get("/config", response_model=ConfigResponse)
async def get_config(economy: Economy) -> ConfigResponse:
    """Catalog summary, packs and cosmetics."""
    config = economy.state.config
    return ConfigResponse(
        card_count=len(config.cards),
        packs=[
            PackResponse(
                id=p.id,
                name=p.name,
                theme=p.theme,
                price=p.price,
                card_count=p.card_count,
                rarity_weights=p.rarity_weights,
                description=p.description,
            )
            for p in config.packs
        ],
        cosmetics=[
            CosmeticResponse(
                id=c.id, name=c.name, type=c.type.value, price=c.price, purchased=c.purchased
            )
            for c in config.cosmetics
        ],
        audio_track_ids=[t.id for t in config.audio_tracks],
        active_card_back_uri=config.active_card_back_uri,
        active_border_style=config.active_border_style,
        game_logo_uri=config.game_logo_uri,
    )


@router.post("/packs/{pack_id}/buy", response_model=PurchaseResponse)
async def buy_pack(pack_id: str, economy: Economy) -> PurchaseResponse:
    """
    Buy and open a pack.

    Returns 404 for an unknown pack and 409 when the purchase is refused
    (not enough gold, or the pack cannot generate cards).
    """
    if economy.state.config.find_pack(pack_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown pack '{pack_id}'",
        )

    cards = economy.buy_pack(pack_id)
    if cards is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Purchase refused. Check your gold balance.",
        )

    return PurchaseResponse(
        pack_id=pack_id,
        cards=[CardResponse.from_card(card) for card in cards],
        gold=economy.state.gold,
    )


@router.post("/cards/sell", response_model=SaleResponse)
async def sell_cards(request: SellRequest, economy: Economy) -> SaleResponse:
    """Sell a batch of cards. Locked and unknown ids are skipped."""
    result = economy.sell_multiple_cards(request.instance_ids)
    return _sale_response(result, economy.state.gold)


@router.post("/cards/sell-duplicates", response_model=SaleResponse)
async def sell_duplicates(economy: Economy) -> SaleResponse:
    """Sell every duplicate except the most valuable copy of each."""
    result = economy.sell_all_duplicates()
    return _sale_response(result, economy.state.gold)


@router.post("/cards/sell-all", response_model=SaleResponse)
async def sell_all(economy: Economy) -> SaleResponse:
    """Sell every unlocked card."""
    result = economy.sell_all_inventory()
    return _sale_response(result, economy.state.gold)


@router.post("/cards/{instance_id}/sell", response_model=SaleResponse)
async def sell_card(instance_id: str, economy: Economy) -> SaleResponse:
    """Sell one card. A locked card sells nothing."""
    if economy.state.inventory.get(instance_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Card '{instance_id}' not in inventory",
        )

    result = economy.sell_card(instance_id)
    return _sale_response(result, economy.state.gold)


@router.post("/cards/{instance_id}/lock", response_model=CardResponse)
async def toggle_lock(instance_id: str, economy: Economy) -> CardResponse:
    """Flip a card's lock."""
    card = economy.toggle_lock(instance_id)
    if card is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Card '{instance_id}' not in inventory",
        )
    return CardResponse.from_card(card)


@router.post("/battle-deck/{instance_id}", response_model=BattleDeckResponse)
async def toggle_battle_deck(instance_id: str, economy: Economy) -> BattleDeckResponse:
    """Add or remove a card from the battle deck. A full deck refuses additions."""
    in_deck = economy.toggle_battle_deck(instance_id)
    return BattleDeckResponse(
        instance_id=instance_id,
        in_deck=in_deck,
        battle_deck=list(economy.state.battle_deck),
    )


@router.post("/battles", response_model=GameResponse)
async def record_battle(request: BattleResultRequest, economy: Economy) -> GameResponse:
    """Apply a finished battle. Send each result exactly once."""
    card = request.card_won.to_card() if request.card_won else None
    economy.record_battle_result(request.won, request.gold_delta, card)
    return _game_response(economy.state)


@router.post("/reset", response_model=GameResponse)
async def reset_progress(economy: Economy) -> GameResponse:
    """Start over. The catalog and cosmetics are kept."""
    economy.reset_progress()
    return _game_response(economy.state)


@router.post("/factory-reset", response_model=StatusResponse)
async def factory_reset(economy: Economy) -> StatusResponse:
    """
    Erase all saved data, config included.

    This is irreversible.
    """
    await economy.factory_reset()
    return StatusResponse(ok=True, message="All saved data has been erased.")


# --- Config endpoints ---


@router.put("/config/cards/{card_id}/image", response_model=StatusResponse)
async def update_card_image(
    card_id: str, request: ImageUpdateRequest, economy: Economy
) -> StatusResponse:
    """Upload art for a card definition. Owned copies pick it up too."""
    if not economy.update_card_image(card_id, request.image_uri):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown card '{card_id}'",
        )
    return StatusResponse(ok=True)


@router.put("/config/sounds", response_model=StatusResponse)
async def update_sound(request: SoundUpdateRequest, economy: Economy) -> StatusResponse:
    """Override a sound effect."""
    economy.update_custom_sfx(request.sfx_type, request.data_uri)
    return StatusResponse(ok=True)


@router.post("/cosmetics/{item_id}/buy", response_model=StatusResponse)
async def buy_cosmetic(item_id: str, economy: Economy) -> StatusResponse:
    """Buy a cosmetic. Refused if unknown, owned or unaffordable."""
    if not economy.buy_cosmetic(item_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Cosmetic purchase refused.",
        )
    return StatusResponse(ok=True)


@router.post("/cosmetics/{item_id}/equip", response_model=StatusResponse)
async def equip_cosmetic(item_id: str, economy: Economy) -> StatusResponse:
    """Equip an owned cosmetic."""
    if not economy.equip_cosmetic(item_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Cosmetic not owned.",
        )
    return StatusResponse(ok=True)


@router.post("/audio-tracks", response_model=StatusResponse)
async def add_audio_track(request: AudioTrackRequest, economy: Economy) -> StatusResponse:
    economy.add_audio_track(AudioTrack(id=request.id, name=request.name, data_uri=request.data_uri))
    return StatusResponse(ok=True)


@router.delete("/audio-tracks/{track_id}", response_model=StatusResponse)
async def remove_audio_track(track_id: str, economy: Economy) -> StatusResponse:
    if not economy.remove_audio_track(track_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown audio track '{track_id}'",
        )
    return StatusResponse(ok=True)
