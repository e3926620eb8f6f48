from typing import Any, Dict, List

import pandas as pd
import streamlit as st

from ui import components as ui
from ui import tables
from ui.api_client import download_snapshot_excel, fetch_snapshot, save_snapshot
from ui.texts import (
    APP_TITLE,
    BTN_DOWNLOAD_EXCEL,
    BTN_RELOAD,
    BTN_SAVE,
    ERR_DUPLICATE_ID,
    ERR_ID_REQUIRED,
    ERR_LOAD,
    ERR_SAVE,
    MSG_CONSUMPTION_HINT,
    MSG_EXPORT_FAILED,
    MSG_NEED_ROWS,
    MSG_SAVED,
    SEC_CONSUMPTION,
    SEC_PRODUCTS,
    SEC_RESOURCES,
)

st.set_page_config(page_title=APP_TITLE, layout="wide")


def load_snapshot() -> Dict[str, Any]:
    try:
        return fetch_snapshot()
    except Exception as exc:
        ui.error(f"{ERR_LOAD}: {exc}")
        return {"products": [], "resources": [], "consumption": {}}


def check_ids(records: List[Dict[str, Any]]) -> bool:
    if any(not r.get("id") for r in records):
        ui.error(ERR_ID_REQUIRED)
        return False
    if tables.duplicate_ids(records):
        ui.error(f"{ERR_DUPLICATE_ID} ({', '.join(tables.duplicate_ids(records))})")
        return False
    return True


def render_summary(products: List[Dict[str, Any]], resources: List[Dict[str, Any]], matrix: pd.DataFrame):
    ui.metric_row(
        [
            {"label": "Products", "value": len(products)},
            {"label": "Resources", "value": len(resources)},
            {"label": "Consumption entries", "value": int(matrix.notna().sum().sum()) if not matrix.empty else 0},
        ]
    )


def main():
    st.title(APP_TITLE)

    if "snapshot" not in st.session_state:
        st.session_state["snapshot"] = load_snapshot()

    flash_msg = st.session_state.pop("flash_message", None)
    if flash_msg:
        ui.success(flash_msg)

    snapshot = st.session_state["snapshot"]

    left, right = st.columns(2)
    with left:
        products_df = ui.editable_table(
            SEC_PRODUCTS,
            tables.records_frame(snapshot["products"], tables.PRODUCT_COLUMNS),
            key="products_editor",
            column_config={"profit": st.column_config.NumberColumn("profit", required=True)},
        )
    with right:
        resources_df = ui.editable_table(
            SEC_RESOURCES,
            tables.records_frame(snapshot["resources"], tables.RESOURCE_COLUMNS),
            key="resources_editor",
            column_config={"stock": st.column_config.NumberColumn("stock", required=True)},
        )

    products = tables.frame_records(products_df, tables.PRODUCT_COLUMNS)
    resources = tables.frame_records(resources_df, tables.RESOURCE_COLUMNS)

    st.markdown("----")
    st.subheader(SEC_CONSUMPTION)
    product_ids = [p["id"] for p in products if p.get("id")]
    resource_ids = [r["id"] for r in resources if r.get("id")]
    matrix = tables.consumption_matrix(snapshot["consumption"], resource_ids, product_ids)
    if product_ids and resource_ids:
        ui.info(MSG_CONSUMPTION_HINT)
        matrix = st.data_editor(matrix, use_container_width=True, key="consumption_editor")
    else:
        ui.warning(MSG_NEED_ROWS)

    st.markdown("----")
    render_summary(products, resources, matrix)

    cols = st.columns(3)
    if cols[0].button(BTN_SAVE, type="primary", key="save_button"):
        if check_ids(products) and check_ids(resources):
            try:
                message = save_snapshot(
                    {
                        "products": products,
                        "resources": resources,
                        "consumption": tables.matrix_records(matrix),
                    }
                )
                st.session_state["snapshot"] = load_snapshot()
                st.session_state["flash_message"] = message or MSG_SAVED
                st.rerun()
            except Exception as exc:
                ui.error(f"{ERR_SAVE}: {exc}")

    if cols[1].button(BTN_RELOAD, key="reload_button"):
        st.session_state["snapshot"] = load_snapshot()
        st.rerun()

    try:
        cols[2].download_button(
            BTN_DOWNLOAD_EXCEL,
            data=download_snapshot_excel(),
            file_name="planning_data.xlsx",
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            key="excel_download",
        )
    except Exception as exc:
        ui.warning(f"{MSG_EXPORT_FAILED} {exc}")


if __name__ == "__main__":
    main()
