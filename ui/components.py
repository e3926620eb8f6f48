from typing import Any, Dict, List

import pandas as pd
import streamlit as st


def metric_row(metrics: List[Dict[str, Any]]):
    cols = st.columns(len(metrics))
    for col, m in zip(cols, metrics):
        col.metric(m["label"], m["value"])


def editable_table(title: str, df: pd.DataFrame, key: str, column_config: Dict[str, Any] = None) -> pd.DataFrame:
    st.markdown(f"**{title}**")
    return st.data_editor(
        df,
        num_rows="dynamic",
        use_container_width=True,
        hide_index=True,
        column_config=column_config,
        key=key,
    )


def success(msg: str):
    st.success(msg)


def error(msg: str):
    st.error(msg)


def warning(msg: str):
    st.warning(msg)


def info(msg: str):
    st.info(msg)
