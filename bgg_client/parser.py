"""XML parsing for catalog responses.

The catalog is inconsistent about where a field's value lives: collection
items carry it as element text (``<yearpublished>1995</yearpublished>``)
while thing records carry it in a ``value`` attribute
(``<yearpublished value="1995"/>``). Every field read goes through
:func:`field_value`, which accepts both shapes.
"""

import xml.etree.ElementTree as ET
from collections.abc import Callable
from typing import TypeVar

from loguru import logger

from bgg_client.errors import CatalogError, CatalogNotFoundError
from bgg_client.schemas import GameDetail, GameSummary

T = TypeVar("T")

COOPERATIVE_MECHANIC = "Cooperative Game"
EXPANSION_TYPE = "boardgameexpansion"


def _raw_value(elem: ET.Element | None) -> str | None:
    if elem is None:
        return None
    value = elem.get("value")
    if value is None:
        value = elem.text
    if value is None:
        return None
    value = value.strip()
    return value or None


def field_value(item: ET.Element, tag: str, cast: Callable[[str], T] = str) -> T | None:
    """Read a child field in either shape, cast it, or return None."""
    raw = _raw_value(item.find(tag))
    if raw is None:
        return None
    try:
        return cast(raw)
    except (TypeError, ValueError):
        return None


def _to_int(raw: str) -> int:
    return int(float(raw))


def _to_positive_float(raw: str) -> float:
    value = float(raw)
    if value <= 0:
        raise ValueError("unrated")
    return round(value, 2)


def parse_document(xml_text: str) -> ET.Element:
    """Parse a response body, raising on catalog error documents."""
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as e:
        raise CatalogError(f"Malformed catalog response: {e}") from e

    if root.tag in ("errors", "error"):
        messages = [m.text.strip() for m in root.iter("message") if m.text]
        message = "; ".join(messages) or "Catalog returned an error"
        logger.warning("Catalog error document: {}", message)
        raise CatalogNotFoundError(message)

    return root


def _primary_name(item: ET.Element) -> str | None:
    for name in item.findall("name"):
        if name.get("type") in (None, "primary"):
            return _raw_value(name)
    return _raw_value(item.find("name"))


def _links(item: ET.Element, link_type: str) -> list[str]:
    return [v for link in item.findall("link") if link.get("type") == link_type and (v := link.get("value"))]


def best_player_count(item: ET.Element) -> int | None:
    """Player count with the most 'Best' votes in the suggested_numplayers poll."""
    poll = next((p for p in item.findall("poll") if p.get("name") == "suggested_numplayers"), None)
    if poll is None:
        return None

    best, best_votes = None, 0
    for results in poll.findall("results"):
        for result in results.findall("result"):
            if result.get("value") != "Best":
                continue
            try:
                votes = int(result.get("numvotes", "0"))
            except ValueError:
                continue
            if votes > best_votes:
                try:
                    best = int(results.get("numplayers", ""))
                except ValueError:
                    continue
                best_votes = votes
    return best


def parse_collection(xml_text: str) -> list[GameSummary]:
    """Parse a collection listing into summary records."""
    root = parse_document(xml_text)
    games = []
    for item in root.findall("item"):
        game_id = item.get("objectid")
        if not game_id:
            continue
        games.append(
            GameSummary(
                id=game_id,
                name=_primary_name(item) or f"#{game_id}",
                year_published=field_value(item, "yearpublished", _to_int),
                thumbnail=field_value(item, "thumbnail"),
                image=field_value(item, "image"),
            )
        )
    logger.debug("Parsed {} collection items", len(games))
    return games


def parse_things(xml_text: str) -> list[GameDetail]:
    """Parse thing records (with stats) into detail records."""
    root = parse_document(xml_text)
    games = []
    for item in root.findall("item"):
        game_id = item.get("id")
        if not game_id:
            continue

        ratings = item.find("statistics/ratings")
        mechanics = _links(item, "boardgamemechanic")
        games.append(
            GameDetail(
                id=game_id,
                name=_primary_name(item) or f"#{game_id}",
                year_published=field_value(item, "yearpublished", _to_int),
                thumbnail=field_value(item, "thumbnail"),
                image=field_value(item, "image"),
                description=field_value(item, "description"),
                min_players=field_value(item, "minplayers", _to_int),
                max_players=field_value(item, "maxplayers", _to_int),
                playing_time=field_value(item, "playingtime", _to_int),
                min_play_time=field_value(item, "minplaytime", _to_int),
                max_play_time=field_value(item, "maxplaytime", _to_int),
                min_age=field_value(item, "minage", _to_int),
                rating=field_value(ratings, "average", _to_positive_float) if ratings is not None else None,
                weight=field_value(ratings, "averageweight", _to_positive_float) if ratings is not None else None,
                best_player_count=best_player_count(item),
                categories=_links(item, "boardgamecategory"),
                mechanics=mechanics,
                is_expansion=item.get("type") == EXPANSION_TYPE,
                is_cooperative=COOPERATIVE_MECHANIC in mechanics,
            )
        )
    logger.debug("Parsed {} thing records", len(games))
    return games
