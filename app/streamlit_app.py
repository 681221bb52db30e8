from typing import List

import pandas as pd
import streamlit as st

from carprice.config import Settings
from carprice.data.load_data import load_listings
from carprice.errors import CarPriceError
from carprice.models.predict import Predictor

st.set_page_config(page_title="Used Car Price Predictor", layout="wide")
st.title("Used Car Price Predictor")

SETTINGS = Settings.from_env()


@st.cache_resource
def load_predictor() -> Predictor:
    return Predictor.load(SETTINGS.artifact_path)


@st.cache_data
def load_df() -> pd.DataFrame:
    try:
        return load_listings(SETTINGS.dataset_path)
    except CarPriceError:
        return pd.DataFrame()


@st.cache_data
def get_category_options(df: pd.DataFrame, column: str) -> List[str]:
    if column not in df.columns:
        return []
    vals = df[column].dropna().astype(str).unique().tolist()
    return sorted(vals)


@st.cache_data
def get_numeric_bounds(df: pd.DataFrame, column: str):
    if column not in df.columns:
        return None
    ser = pd.to_numeric(df[column], errors="coerce").dropna()
    if ser.empty:
        return None
    return float(ser.min()), float(ser.max()), float(ser.median())


df = load_df()

st.sidebar.header("Car Details")


def select_or_text(df_col: str, label: str, default: str):
    options = get_category_options(df, df_col)
    if options:
        index = options.index(default) if default in options else 0
        return st.sidebar.selectbox(label, options, index=index)
    return st.sidebar.text_input(label, value=default)


make = select_or_text("Make", "Make", "VW")
model_options = get_category_options(df[df["Make"] == make], "Model") if not df.empty else []
if model_options:
    model = st.sidebar.selectbox("Model", model_options, index=0)
else:
    model = st.sidebar.text_input("Model", value="Golf")
fuel_type = select_or_text("FuelType", "Fuel Type", "Petrol")
gear = select_or_text("Gear", "Gear", "Manual")
year = select_or_text("Year", "Year", "2010")


def number_input_with_bounds(label: str, column: str, default: float, step: float):
    bounds = get_numeric_bounds(df, column)
    if bounds:
        min_v, max_v, median_v = bounds
        return st.sidebar.number_input(label, int(min_v), int(max_v), int(median_v), step=int(step))
    return st.sidebar.number_input(label, 0, None, int(default), step=int(step))


cubic_capacity = number_input_with_bounds("Cubic Capacity", "CubicCapacity", 1400, 100)
horse_power = number_input_with_bounds("Horse Power", "HorsePower", 75, 5)
mileage = number_input_with_bounds("Range (km)", "Range", 150000, 1000)

input_dict = {
    "Make": make,
    "Model": model,
    "CubicCapacity": int(cubic_capacity),
    "FuelType": fuel_type,
    "Gear": gear,
    "HorsePower": int(horse_power),
    "Range": int(mileage),
    "Year": str(year),
}

col1, col2 = st.columns([2, 1])

with col1:
    if st.button("Predict Price"):
        try:
            price = load_predictor().score(input_dict)
            st.markdown(f"<h1 style='margin:0'>{price:,.0f}</h1>", unsafe_allow_html=True)
            st.caption("Predicted price")
        except CarPriceError as e:
            st.error(f"Prediction failed: {e}")

with col2:
    st.subheader("Input")
    st.json(input_dict)

st.markdown("---")
