"""
Seed / import script -- populates ``points_of_interest``.

Run after migrations:
    python seed.py                            # built-in Seoul sample data
    python seed.py stations stations.json     # import raw station records
    python seed.py parking  parking.json      # import raw parking-lot records

Records go through the same boundary normalisation the service relies on,
so vendor-shaped JSON (``PKLT_CD``, ``OS_NM`` ...) can be imported as-is.
Re-running upserts by ``(kind, external_id)``.  The Redis snapshot version is
bumped at the end so running API processes pick the new data up.

Creates (built-in):
  - 6 sample fuel stations around Seoul City Hall (two also quote diesel)
  - 5 sample parking lots (one without coordinates, one free)
"""

import asyncio
import json
import sys

from poifinder.domain.enums import EntityKind
from poifinder.infrastructure.database import async_session_factory, engine
from poifinder.infrastructure.normalize import normalize_records
from poifinder.infrastructure.redis_client import (
    bump_snapshot_version,
    get_redis,
)
from poifinder.infrastructure.repositories import PointOfInterestRepository

# Seoul City Hall (approx)
CITY_HALL_LAT, CITY_HALL_LNG = 37.5665, 126.9780

KINDS = {"stations": EntityKind.FUEL_STATION, "parking": EntityKind.PARKING_LOT}


STATIONS = [
    {"UNI_ID": "A0000001", "OS_NM": "City Hall Energy", "POLL_DIV_CD": "SKE",
     "PRICE": 1689, "WGS84_LAT": 37.5670, "WGS84_LNG": 126.9775,
     "NEW_ADR": "Sejong-daero 110"},
    {"UNI_ID": "A0000002", "OS_NM": "Gwanghwamun Oil", "POLL_DIV_CD": "GSC",
     "PRICE": 1725, "WGS84_LAT": 37.5720, "WGS84_LNG": 126.9768,
     "NEW_ADR": "Sejong-daero 172"},
    {"UNI_ID": "A0000003", "OS_NM": "Seosomun Self", "POLL_DIV_CD": "HDO",
     "PRICE": 1598, "WGS84_LAT": 37.5630, "WGS84_LNG": 126.9700,
     "NEW_ADR": "Seosomun-ro 45"},
    {"UNI_ID": "A0000004", "OS_NM": "Namdaemun Fuel", "POLL_DIV_CD": "SOL",
     "PRICE": 1655, "WGS84_LAT": 37.5590, "WGS84_LNG": 126.9770,
     "VAN_ADR": "Namdaemun-ro 5-ga 12"},
    {"UNI_ID": "A0000005", "OS_NM": "Euljiro Economy", "POLL_DIV_CD": "RTX",
     "PRICE": 1549, "WGS84_LAT": 37.5660, "WGS84_LNG": 126.9920,
     "NEW_ADR": "Eulji-ro 100"},
    # Diesel quotes arrive as separate rows and merge into the stations above
    {"UNI_ID": "A0000001", "OS_NM": "City Hall Energy", "PRODCD": "D047",
     "PRICE": 1549, "WGS84_LAT": 37.5670, "WGS84_LNG": 126.9775},
    {"UNI_ID": "A0000003", "OS_NM": "Seosomun Self", "PRODCD": "D047",
     "PRICE": 1472, "WGS84_LAT": 37.5630, "WGS84_LNG": 126.9700},
    # Price not reported by the feed -> unpriced
    {"UNI_ID": "A0000006", "OS_NM": "Jongno Station", "POLL_DIV_CD": "SKE",
     "PRICE": 0, "WGS84_LAT": 37.5700, "WGS84_LNG": 126.9830},
]

PARKING_LOTS = [
    {"PKLT_CD": "1010089", "PKLT_NM": "Seoul Plaza Underground", "ADDR": "Jung-gu Taepyeong-ro 1-ga 31",
     "LAT": 37.5663, "LOT": 126.9779, "TPKCT": 185, "PRK_CRG": 400, "PRK_HM": 5,
     "ADD_CRG": 400, "ADD_UNIT_TM_MNT": 5, "DLY_MAX_CRG": 30000,
     "OPER_SE_NM": "Time-based", "CHGD_FREE_NM": "Paid",
     "WD_OPER_BGNG_TM": "0000", "WD_OPER_END_TM": "2400", "TELNO": "02-000-0001"},
    {"PKLT_CD": "1010090", "PKLT_NM": "Deoksugung Public", "ADDR": "Jung-gu Jeong-dong 5",
     "LAT": 37.5658, "LOT": 126.9750, "TPKCT": 60, "PRK_CRG": 300, "PRK_HM": 5,
     "OPER_SE_NM": "Time-based", "CHGD_FREE_NM": "Paid",
     "WD_OPER_BGNG_TM": "0900", "WD_OPER_END_TM": "2200"},
    {"PKLT_CD": "1010091", "PKLT_NM": "Cheonggyecheon Free Lot", "ADDR": "Jung-gu Mugyo-dong 9",
     "LAT": 37.5685, "LOT": 126.9800, "TPKCT": 20, "PRK_CRG": 0,
     "OPER_SE_NM": "Time-based", "CHGD_FREE_NM": "Free"},
    {"PKLT_CD": "1010092", "PKLT_NM": "Myeongdong Tower", "ADDR": "Jung-gu Myeong-dong 2-ga 3",
     "LAT": 37.5636, "LOT": 126.9850, "TPKCT": 240, "PRK_CRG": 600, "PRK_HM": 10},
    # Address only; still stored, never returned by nearby queries
    {"PKLT_CD": "1010093", "PKLT_NM": "Sogong-ro Annex", "ADDR": "Jung-gu Sogong-dong 70",
     "LAT": 0, "LOT": 0, "TPKCT": 35, "PRK_CRG": 500},
]


async def seed(batches):
    async with async_session_factory() as session:
        repo = PointOfInterestRepository(session)
        for kind, records in batches:
            entities = normalize_records(records, kind)
            written = await repo.upsert_many(entities)
            located = sum(1 for e in entities if e.location is not None)
            print(f"  Upserted {written} {kind.value} ({located} with coordinates)")
        await session.commit()

    version = await bump_snapshot_version(await get_redis())
    print(f"\nSeed complete! Snapshot version is now {version}")


def _load_batches(argv):
    if not argv:
        return [
            (EntityKind.FUEL_STATION, STATIONS),
            (EntityKind.PARKING_LOT, PARKING_LOTS),
        ]
    if len(argv) != 2 or argv[0] not in KINDS:
        sys.exit("usage: python seed.py [stations|parking FILE.json]")
    with open(argv[1], encoding="utf-8") as fh:
        records = json.load(fh)
    return [(KINDS[argv[0]], records)]


async def main():
    print("Seeding database...")
    await seed(_load_batches(sys.argv[1:]))
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
