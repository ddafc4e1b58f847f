"""Shared fixtures: configs, catalog page builders and HTML fixture loading."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable

import pytest

from gatherer_ingest.cards import CardRecord, Language, RawCardBundle
from gatherer_ingest.config import ConfigLocator, ConfigRepository, IngestConfig
from gatherer_ingest.engine.parser import DEFAULT_PREFIX

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_config(tmp_path: Path) -> IngestConfig:
    return IngestConfig(
        detail_url_template="https://cards.test/detail?id={id}",
        image_url_template="https://cards.test/image?id={id}",
        language_url_template="https://cards.test/languages?id={id}",
        batch_size=2,
        retry_wait_seconds=0,
        request_timeout=5,
        max_identifier=10,
        database_path=tmp_path / "cards.db",
    )


@pytest.fixture
def temp_config_repository(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterable[ConfigRepository]:
    monkeypatch.setenv("GATHERER_INGEST_HOME", str(tmp_path))
    locator = ConfigLocator(project_root=tmp_path)
    repository = ConfigRepository(locator)
    yield repository


@pytest.fixture
def fixture_bytes() -> Callable[[str], bytes]:
    def _load(name: str) -> bytes:
        return (FIXTURES_DIR / "html" / name).read_bytes()

    return _load


def _row(prefix: str, suffix: str, label: str, value_html: str) -> str:
    return (
        f'<div id="{prefix}{suffix}" class="row">'
        f'<div class="label">{label}</div>'
        f'<div class="value">{value_html}</div>'
        "</div>"
    )


def build_card_page(
    *,
    name: str = "Grizzly Bears",
    type_line: str | None = "Creature  — Bear",
    mana: Iterable[str] = ("1", "Green"),
    text_blocks: Iterable[str] = (),
    flavor_blocks: Iterable[str] = (),
    pt: str | None = None,
    pt_label: str = "P/T:",
    expansion: str | None = "Limited Edition Alpha",
    rarity: str | None = "Common",
    number: str | None = None,
    artist_html: str | None = '<a href="/Search?artist=Jeff">Jeff A. Menges</a>',
    watermark: str | None = None,
    prefix: str = DEFAULT_PREFIX,
) -> str:
    """Render a minimal detail page using the catalog's row/label/value markup."""

    rows = [_row(prefix, "nameRow", "Card Name:", name)]
    mana = list(mana)
    if mana:
        images = "".join(f'<img src="/Handlers/Image.ashx?size=medium" alt="{alt}">' for alt in mana)
        rows.append(_row(prefix, "manaRow", "Mana Cost:", images))
    if type_line is not None:
        rows.append(_row(prefix, "typeRow", "Types:", type_line))
    text_blocks = list(text_blocks)
    if text_blocks:
        body = "".join(f'<div class="cardtextbox">{block}</div>' for block in text_blocks)
        rows.append(_row(prefix, "textRow", "Card Text:", body))
    flavor_blocks = list(flavor_blocks)
    if flavor_blocks:
        body = "".join(f'<div class="cardtextbox">{block}</div>' for block in flavor_blocks)
        rows.append(_row(prefix, "FlavorText", "Flavor Text:", body))
    if pt is not None:
        rows.append(_row(prefix, "ptRow", pt_label, pt))
    if expansion is not None:
        rows.append(
            _row(
                prefix,
                "currentSetSymbol",
                "Expansion:",
                f'<a href="/Search?set=x"><img alt="{expansion} (Common)"></a>'
                f'<a href="/Search?set=x">{expansion}</a>',
            )
        )
    if rarity is not None:
        rows.append(_row(prefix, "rarityRow", "Rarity:", f'<span class="common">{rarity}</span>'))
    if number is not None:
        rows.append(_row(prefix, "numberRow", "Card Number:", number))
    if artist_html is not None:
        rows.append(_row(prefix, "artistRow", "Artist:", artist_html))
    if watermark is not None:
        rows.append(_row(prefix, "markRow", "Watermark:", f'<div class="cardtextbox">{watermark}</div>'))
    return "<html><body><form>" + "".join(rows) + "</form></body></html>"


def build_language_page(*labels: str) -> str:
    """Language-variant page listing other printings in the given languages."""

    cells = "".join(
        f'<tr class="cardItem"><td><a href="#">Card</a></td><td>{label}</td><td>Translated</td></tr>'
        for label in labels
    )
    return f'<html><body><table class="cardList">{cells}</table></body></html>'


@pytest.fixture
def card_page() -> Callable[..., str]:
    return build_card_page


@pytest.fixture
def language_page() -> Callable[..., str]:
    return build_language_page


@pytest.fixture
def card_bundle() -> Callable[..., RawCardBundle]:
    def _builder(identifier: int = 1, page: str | None = None, languages: str = "", image: bytes = b"") -> RawCardBundle:
        detail = build_card_page() if page is None else page
        return RawCardBundle(
            identifier=identifier,
            detail=detail.encode("utf-8"),
            image=image,
            language=languages.encode("utf-8"),
        )

    return _builder


@pytest.fixture
def sample_record() -> Callable[..., CardRecord]:
    def _builder(identifier: int = 1, **overrides) -> CardRecord:
        base = {
            "identifier": identifier,
            "name": f"Card {identifier}",
            "type_line": "Instant",
            "expansion": "Test Set",
            "language": Language.ENGLISH,
        }
        base.update(overrides)
        return CardRecord(**base)

    return _builder
