"""
NFT 收藏品投资追踪 - Web 界面
启动命令: streamlit run app.py
"""

import logging

import pandas as pd
import streamlit as st

from services.comparator import SuccessResult
from services.tracker import InvestmentsTracker, RequestState
from services.windows import TIMEFRAME_LABELS, Chain, Timeframe, describe_days

# 配置日志
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# ==================== 浅色主题 CSS ====================
LIGHT_THEME_CSS = """
<style>
    @import url('https://fonts.googleapis.com/css2?family=Inter:wght@300;400;500;600;700&display=swap');

    .stApp {
        font-family: 'Inter', -apple-system, BlinkMacSystemFont, sans-serif;
        background: #f5f7fa;
    }

    section[data-testid="stSidebar"] {
        background: #ffffff !important;
        border-right: 1px solid #e2e8f0;
    }

    .stDataFrame {
        background: #f2f2f2;
        border-radius: 10px;
        border: 1px solid #e2e8f0;
    }

    .stButton > button[kind="primary"] {
        background: linear-gradient(135deg, #3b82f6 0%, #2563eb 100%);
        color: white;
        border: none;
        font-weight: 600;
        border-radius: 8px;
        width: 100%;
    }

    .message { color: #334155; font-size: 0.95rem; }

    .empty-state {
        text-align: center;
        padding: 3rem 1.5rem;
        background: #ffffff;
        border-radius: 12px;
        border: 1px solid #e2e8f0;
    }

    .empty-state .title { font-size: 1.1rem; color: #334155; font-weight: 600; margin-bottom: 0.25rem; }
    .empty-state .desc { color: #94a3b8; font-size: 0.85rem; }

    #MainMenu { visibility: hidden; }
    footer { visibility: hidden; }
</style>
"""

# 页面配置
st.set_page_config(
    page_title="Collection Investments Tracker",
    page_icon="chart",
    layout="wide",
    initial_sidebar_state="expanded",
    menu_items=None,
)

# 注入 CSS
st.markdown(LIGHT_THEME_CSS, unsafe_allow_html=True)


def init_session_state():
    """初始化会话状态"""
    if "tracker" not in st.session_state:
        st.session_state.tracker = InvestmentsTracker()


def rows_to_dataframe(result: SuccessResult) -> pd.DataFrame:
    """转换为 DataFrame"""
    prior_header = f"{describe_days(result.window_day_count)} ago"
    data = []
    for row in result.rows:
        data.append({
            "Sales Data": row.label,
            prior_header: row.prior_formatted,
            "Today": row.current_formatted,
            "Change": row.change_display,
        })
    return pd.DataFrame(data)


def change_colors(result: SuccessResult):
    """涨跌颜色：下跌红色，其余绿色"""
    return ["color: red" if row.is_decline else "color: green" for row in result.rows]


def render_result(tracker: InvestmentsTracker):
    """渲染查询结果"""
    if tracker.state is RequestState.ERROR:
        st.error(tracker.error_message)
        return

    if tracker.state is RequestState.NO_DATA:
        st.error(tracker.result.message)
        return

    if tracker.state is not RequestState.SUCCESS:
        st.markdown("""
            <div class="empty-state">
                <div class="title">Retrieve Data</div>
                <div class="desc">Select a chain and timeframe, then enter a contract address.</div>
            </div>
        """, unsafe_allow_html=True)
        return

    result = tracker.result
    days = describe_days(result.window_day_count)
    st.markdown(
        f'<p class="message">The current data represents sales data from today back to {days} ago.</p>',
        unsafe_allow_html=True,
    )
    st.markdown(
        f'<p class="message">The data from {days} ago is over the same timeframe '
        f'but starting {days} ago.</p>',
        unsafe_allow_html=True,
    )

    df = rows_to_dataframe(result)
    colors = change_colors(result)
    styled = df.style.apply(lambda _: colors, subset=["Change"], axis=0)
    st.dataframe(styled, use_container_width=True, hide_index=True)


def main():
    init_session_state()
    tracker = st.session_state.tracker

    st.title("Collection Investments Tracker")
    st.markdown(
        '<p class="message">Select a blockchain and timeframe, then input a contract address '
        'to see how sales data has changed.</p>',
        unsafe_allow_html=True,
    )

    # 侧边栏
    with st.sidebar:
        chain = st.selectbox("Blockchain", list(Chain), format_func=lambda c: c.value, key="chain")
        timeframe = st.selectbox(
            "Timeframe",
            list(Timeframe),
            format_func=lambda t: TIMEFRAME_LABELS[t],
            key="timeframe",
        )
        contract_address = st.text_input("Contract Address", placeholder="Contract Address", key="address")

        st.divider()
        retrieve_btn = st.button("Retrieve Data", type="primary", use_container_width=True)

    if retrieve_btn:
        with st.spinner("Loading..."):
            tracker.submit(contract_address, chain, timeframe)

    render_result(tracker)


if __name__ == "__main__":
    main()
