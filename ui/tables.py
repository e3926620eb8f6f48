"""Conversions between API snapshots and the editable DataFrames shown in the UI."""

from typing import Any, Dict, List

import pandas as pd

from modules.planning.service import consumption_key

PRODUCT_COLUMNS = ["id", "name", "profit"]
RESOURCE_COLUMNS = ["id", "name", "stock"]


def records_frame(records: List[Dict[str, Any]], columns: List[str]) -> pd.DataFrame:
    return pd.DataFrame(records, columns=columns)


def frame_records(df: pd.DataFrame, columns: List[str]) -> List[Dict[str, Any]]:
    """Turn an edited table back into records, skipping rows left completely empty."""
    records = []
    for row in df[columns].to_dict(orient="records"):
        if all(pd.isna(value) or value == "" for value in row.values()):
            continue
        record = {}
        for column, value in row.items():
            record[column] = None if pd.isna(value) else value
        if record.get("id") is not None:
            record["id"] = str(record["id"]).strip()
        records.append(record)
    return records


def consumption_matrix(
    consumption: Dict[str, float], resource_ids: List[str], product_ids: List[str]
) -> pd.DataFrame:
    """Resources as rows, products as columns, empty cells where nothing is consumed."""
    matrix = pd.DataFrame(index=resource_ids, columns=product_ids, dtype=float)
    for resource_id in resource_ids:
        for product_id in product_ids:
            amount = consumption.get(consumption_key(resource_id, product_id))
            if amount is not None:
                matrix.loc[resource_id, product_id] = float(amount)
    return matrix


def matrix_records(matrix: pd.DataFrame) -> List[Dict[str, Any]]:
    records = []
    for resource_id, row in matrix.iterrows():
        for product_id, amount in row.items():
            if pd.isna(amount):
                continue
            records.append({"resource_id": str(resource_id), "product_id": str(product_id), "amount": float(amount)})
    return records


def duplicate_ids(records: List[Dict[str, Any]]) -> List[str]:
    seen = set()
    duplicates = []
    for record in records:
        record_id = record.get("id")
        if record_id in seen and record_id not in duplicates:
            duplicates.append(record_id)
        seen.add(record_id)
    return duplicates
