import logging
from typing import Any, Collection, Dict, List, Tuple

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.errors import AppException, StorageReadError, StorageWriteError, ValidationAppException
from core.settings import CONSUMPTION_KEY_SEPARATOR
from modules.planning import models, schemas

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("products", "resources", "consumption")


def consumption_key(resource_id: str, product_id: str) -> str:
    return f"{resource_id}{CONSUMPTION_KEY_SEPARATOR}{product_id}"


def split_consumption_key(
    key: str, resource_ids: Collection[str], product_ids: Collection[str]
) -> Tuple[str, str]:
    """Split a ``"{resource_id}_{product_id}"`` key into its two ids.

    Ids may themselves contain the separator, so every separator position is
    tried against the ids submitted alongside the key. A single match wins;
    several matches make the key ambiguous. With no match the key is split at
    the first separator and the foreign keys decide whether the row is valid.
    """
    positions = [i for i, ch in enumerate(key) if ch == CONSUMPTION_KEY_SEPARATOR]
    if not positions:
        raise StorageWriteError(f"Malformed consumption key '{key}'")

    candidates = [(key[:i], key[i + 1:]) for i in positions]
    matches = [(r_id, p_id) for r_id, p_id in candidates if r_id in resource_ids and p_id in product_ids]
    if len(matches) > 1:
        raise StorageWriteError(f"Ambiguous consumption key '{key}'")
    if matches:
        return matches[0]
    return candidates[0]


def _serialize_snapshot(
    products: List[models.Product],
    resources: List[models.Resource],
    consumption: List[models.Consumption],
) -> Dict[str, Any]:
    return {
        "products": [{"id": p.id, "name": p.name, "profit": p.profit} for p in products],
        "resources": [{"id": r.id, "name": r.name, "stock": r.stock} for r in resources],
        # rows come ordered by id, so the latest duplicate pair overwrites earlier ones
        "consumption": {consumption_key(c.resource_id, c.product_id): c.amount for c in consumption},
    }


def _fetch_all(db: Session) -> Tuple[List[models.Product], List[models.Resource], List[models.Consumption]]:
    # the three queries share the session transaction, so they read one committed state
    try:
        products = db.query(models.Product).order_by(models.Product.id).all()
        resources = db.query(models.Resource).order_by(models.Resource.id).all()
        consumption = db.query(models.Consumption).order_by(models.Consumption.id).all()
    except SQLAlchemyError as exc:
        logger.error("Reading planning data failed: %s", exc)
        raise StorageReadError(_driver_message(exc)) from exc
    return products, resources, consumption


def get_snapshot(db: Session) -> Dict[str, Any]:
    return _serialize_snapshot(*_fetch_all(db))


def get_snapshot_records(db: Session) -> Dict[str, Any]:
    """Same data as ``get_snapshot`` but with consumption as explicit records.

    Used where the resource and product ids are needed separately, since a
    composite key cannot always be split back unambiguously.
    """
    products, resources, consumption = _fetch_all(db)
    snapshot = _serialize_snapshot(products, resources, [])
    snapshot["consumption"] = [
        {"resource_id": c.resource_id, "product_id": c.product_id, "amount": c.amount} for c in consumption
    ]
    return snapshot


def _consumption_rows(snapshot_in: schemas.SnapshotIn) -> List[models.Consumption]:
    if isinstance(snapshot_in.consumption, dict):
        resource_ids = {r.id for r in snapshot_in.resources}
        product_ids = {p.id for p in snapshot_in.products}
        records = []
        for key, amount in snapshot_in.consumption.items():
            resource_id, product_id = split_consumption_key(key, resource_ids, product_ids)
            records.append(schemas.ConsumptionRecord(resource_id=resource_id, product_id=product_id, amount=amount))
    else:
        records = snapshot_in.consumption

    return [
        models.Consumption(resource_id=rec.resource_id, product_id=rec.product_id, amount=rec.amount)
        for rec in records
    ]


def replace_snapshot(db: Session, snapshot_in: schemas.SnapshotIn) -> None:
    missing = [name for name in REQUIRED_FIELDS if getattr(snapshot_in, name) is None]
    if missing:
        raise ValidationAppException(f"Missing data: {', '.join(missing)}")

    try:
        db.execute(delete(models.Consumption))
        db.execute(delete(models.Product))
        db.execute(delete(models.Resource))
        # bulk deletes leave stale instances behind in the identity map
        db.expunge_all()

        db.add_all(models.Product(id=p.id, name=p.name, profit=p.profit) for p in snapshot_in.products)
        db.flush()
        db.add_all(models.Resource(id=r.id, name=r.name, stock=r.stock) for r in snapshot_in.resources)
        db.flush()
        consumption_rows = _consumption_rows(snapshot_in)
        db.add_all(consumption_rows)
        db.flush()

        db.commit()
    except AppException as exc:
        db.rollback()
        logger.error("Replacing planning data failed, rolled back: %s", exc.message)
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Replacing planning data failed, rolled back: %s", exc)
        raise StorageWriteError(_driver_message(exc)) from exc

    logger.info(
        "Replaced planning data: %d products, %d resources, %d consumption rows",
        len(snapshot_in.products),
        len(snapshot_in.resources),
        len(consumption_rows),
    )


def _driver_message(exc: SQLAlchemyError) -> str:
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)
