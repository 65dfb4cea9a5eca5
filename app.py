import pandas as pd
import streamlit as st
from contextlib import contextmanager
from typing import Optional

from healthdash import data as dc
from healthdash.config import SAMPLE_SIZE_DEFAULT, SAMPLE_SIZE_MAX, configure_logging
from healthdash.filters import EMISSIONS_YEARS, HEALTH_YEARS, WEALTH_YEARS
from healthdash.views_debug import compute_debug
from healthdash.views_health import compute_health_spending
from healthdash.views_overview import compute_overview
from healthdash.views_wealth import compute_emissions, compute_wealth

configure_logging()


# ---------- UI / layout helpers ----------
def inject_base_styles():
    st.markdown(
        """
        <style>
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;margin-bottom: 12px;}
        .card-title {font-weight: 600;margin-bottom: 8px;}
        </style>
        """,
        unsafe_allow_html=True,
    )


@contextmanager
def card(title: str):
    st.markdown(f"<div class='card'><div class='card-title'>{title}</div>", unsafe_allow_html=True)
    yield
    st.markdown("</div>", unsafe_allow_html=True)


def render_page_header(title: str, export_df: Optional[pd.DataFrame] = None, export_name: str = "export.csv"):
    c1, c2 = st.columns([8, 2])
    c1.subheader(title)
    if export_df is not None and not export_df.empty:
        c2.download_button(
            "Export CSV",
            data=export_df.to_csv(index=False).encode("utf-8"),
            file_name=export_name,
            mime="text/csv",
        )


# ---------- UI setup ----------
st.set_page_config(page_title="Health Spending Dashboard", layout="wide")
inject_base_styles()
st.title("Government Health Spending & Wellbeing")
st.caption("Demographic, economic and health expenditure indicators joined by country and year.")

try:
    data_ctx = dc.load_dashboard_data()
except dc.DataSourceError as exc:
    st.error(f"Could not load the source datasets: {exc}")
    st.stop()

indicator_specs = data_ctx.get("indicators", {}) or {}
indicator_options = list(indicator_specs)

# ----- Sidebar: navigation + page controls -----
with st.sidebar:
    st.markdown("### Navigate")
    current_page = st.radio(
        "Navigate",
        ["Overview", "GDP vs Life Expectancy", "GDP vs CO2", "Health Spending", "Data Quality", "Conclusion"],
        index=0,
    )
    st.markdown("---")
    st.markdown("### Controls")
    wealth_year = WEALTH_YEARS.default
    emissions_year = EMISSIONS_YEARS.default
    health_year = HEALTH_YEARS.default
    indicator = indicator_options[0] if indicator_options else ""
    average = False
    sample_size = SAMPLE_SIZE_DEFAULT
    if current_page == "Overview":
        sample_size = st.slider("Sample rows", min_value=1, max_value=SAMPLE_SIZE_MAX, value=SAMPLE_SIZE_DEFAULT)
    elif current_page == "GDP vs Life Expectancy":
        wealth_year = st.slider("Year", min_value=WEALTH_YEARS.first, max_value=WEALTH_YEARS.last, value=WEALTH_YEARS.default)
    elif current_page == "GDP vs CO2":
        emissions_year = st.slider(
            "Year", min_value=EMISSIONS_YEARS.first, max_value=EMISSIONS_YEARS.last, value=EMISSIONS_YEARS.default
        )
    elif current_page == "Health Spending":
        average = st.checkbox("Average over years?", value=False)
        health_year = st.slider(
            "Year", min_value=HEALTH_YEARS.first, max_value=HEALTH_YEARS.last, value=HEALTH_YEARS.default, step=1
        )
        if indicator_options:
            indicator = st.selectbox(
                "Select indicator",
                options=indicator_options,
                format_func=lambda col: indicator_specs[col].label,
            )
    else:
        st.caption("No controls for this page.")

filters = {
    "wealth_year": wealth_year,
    "emissions_year": emissions_year,
    "health_year": health_year,
    "indicator": indicator,
    "average": average,
    "sample_size": sample_size,
}

ctx = dc.prepare_context(filters, data_ctx)
filt = ctx["filters"]


def render_overview_page():
    payload = compute_overview(filt, ctx)
    render_page_header("Overview", export_df=ctx["combined"], export_name="combined.csv")
    with card("Goals"):
        st.write(
            "This dashboard helps individuals and policymakers relate how much governments spend on health "
            "to a range of socioeconomic and demographic indicators, as a starting point for evidence-based "
            "health policy."
        )
    with card("Data sources"):
        st.markdown(
            "- Demographic and socio-economic indicators from "
            "[UNESCO](http://data.uis.unesco.org/Index.aspx?DataSetCode=demo_ds#).\n"
            "- Domestic general government health expenditure from the "
            "[World Bank](https://data.worldbank.org/indicator/SH.XPD.GHED.PP.CD), sourced from the WHO "
            "Global Health Expenditure database.\n"
            "- Country indicators from [Gapminder](https://www.gapminder.org/data/)."
        )
    with card("Dataset sample"):
        cols = st.columns(3)
        cols[0].metric("Rows", f"{payload['row_count']:,}")
        cols[1].metric("Countries", f"{payload['country_count']:,}")
        span = (
            f"{payload['year_min']}–{payload['year_max']}"
            if payload["year_min"] is not None
            else "N/A"
        )
        cols[2].metric("Years", span)
        st.caption(
            "Each row is one country and year; the three sources are joined on these identifiers. "
            "Values may be missing, especially outside 2000-2019."
        )
        st.dataframe(pd.DataFrame(payload["sample"], columns=payload["columns"]), use_container_width=True, hide_index=True)


def render_scatter_page(title: str, payload: dict, export_df: pd.DataFrame, export_name: str, note: str = ""):
    render_page_header(title, export_df=export_df, export_name=export_name)
    with card(f"{title} ({payload['year']})"):
        if note:
            st.write(note)
        if payload["missing_columns"]:
            st.warning(f"Columns not found in the data: {', '.join(payload['missing_columns'])}")
        if payload["points"] == 0:
            st.info("No observations for the selected year.")
        st.vega_lite_chart(payload["chart"], use_container_width=True)


def render_health_page():
    render_page_header("Health Spending", export_df=ctx["health_data"], export_name="health_spending.csv")
    with card("Health expenditure vs wellbeing"):
        st.write(
            "Explore whether a country's health expenditure correlates with indicators of wellbeing, "
            "and how the relationship varies between countries and regions."
        )
        if not filt.indicator:
            st.info("No plottable indicators are available in the loaded data.")
            return
        payload = compute_health_spending(filt, ctx)
        if payload["points"] == 0:
            st.info("No observations with both spending and the selected indicator.")
        st.vega_lite_chart(payload["chart"], use_container_width=True)
        st.write(payload["correlation_text"])


def render_debug_page():
    payload = compute_debug(filt, ctx)
    render_page_header("Data Quality")
    with card("Data Quality"):
        st.markdown("**Source files**")
        st.write(payload["files"])
        st.markdown("**Row counts**")
        st.write(payload["row_counts"])
        st.write({"duplicate_iso3_time_keys": payload["duplicate_keys"]})
        if payload["year_coverage"]:
            st.markdown("**Year coverage**")
            st.dataframe(pd.DataFrame(payload["year_coverage"]), hide_index=True)
        if payload["indicator_coverage"]:
            st.markdown("**Indicator coverage**")
            st.dataframe(pd.DataFrame(payload["indicator_coverage"]), hide_index=True)


def render_conclusion_page():
    render_page_header("Conclusion")
    with card("Takeaways"):
        st.write(
            "Use the pages above to compare wealth, emissions and health outcomes against government health "
            "expenditure. Correlations are descriptive and do not imply causation."
        )


if current_page == "Overview":
    render_overview_page()
elif current_page == "GDP vs Life Expectancy":
    render_scatter_page(
        "GDP vs Life Expectancy",
        compute_wealth(filt, ctx),
        ctx["wealth_year"],
        "gdp_life_expectancy.csv",
    )
elif current_page == "GDP vs CO2":
    render_scatter_page(
        "GDP vs CO2 Emissions",
        compute_emissions(filt, ctx),
        ctx["emissions_year"],
        "gdp_co2.csv",
        note=(
            "GDP per capita against CO2 emissions per capita (metric tons). Over time, wealth has shifted from "
            "funding industrialization towards funding more sustainable growth."
        ),
    )
elif current_page == "Health Spending":
    render_health_page()
elif current_page == "Data Quality":
    render_debug_page()
else:
    render_conclusion_page()
