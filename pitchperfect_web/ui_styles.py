from __future__ import annotations


def get_app_css() -> str:
    return """
    <style>
    :root {
        --pp-green: #0E3B2E;
        --pp-green-2: #14513F;
        --pp-light-bg: #F1F5F2;
        --pp-card-bg: #FFFFFF;
        --pp-text: #111A16;
        --pp-muted: #5F6F67;
        --pp-accent: #2FBF71;
        --pp-gold: #E3B341;
        --pp-border: #D6E0DA;
        --pp-shadow: 0 8px 20px rgba(9, 30, 22, 0.06);
    }

    .stApp {
        background: linear-gradient(180deg, #F4F7F5 0%, #F1F5F2 240px, #F1F5F2 100%);
        color: var(--pp-text);
    }

    #MainMenu,
    footer {
        visibility: hidden;
        height: 0;
    }

    .block-container {
        max-width: 1180px;
        padding-top: 1.1rem;
        padding-bottom: 1.4rem;
    }

    section[data-testid="stSidebar"] > div {
        background: linear-gradient(180deg, #0E3B2E 0%, #14513F 100%);
        border-right: 1px solid rgba(255,255,255,0.08);
    }

    section[data-testid="stSidebar"] * {
        color: #E3EEE8;
    }

    .pp-header {
        display: flex;
        align-items: center;
        gap: 0.9rem;
        background: linear-gradient(120deg, var(--pp-green) 0%, var(--pp-green-2) 100%);
        border-radius: 14px;
        padding: 0.9rem 1.2rem;
        margin-bottom: 0.8rem;
        box-shadow: var(--pp-shadow);
    }

    .pp-header img {
        width: 52px;
        height: 52px;
        border-radius: 10px;
        background: #FFFFFF;
        object-fit: contain;
    }

    .pp-wordmark {
        color: #FFFFFF;
        font-size: 1.45rem;
        font-weight: 800;
        letter-spacing: 0.01em;
    }

    .pp-tagline {
        color: #BFD8CB;
        font-size: 0.88rem;
    }

    .pp-chip {
        display: inline-block;
        background: rgba(47, 191, 113, 0.12);
        color: var(--pp-green);
        border: 1px solid rgba(47, 191, 113, 0.35);
        border-radius: 999px;
        padding: 0.1rem 0.6rem;
        font-size: 0.76rem;
        font-weight: 600;
        margin-right: 0.3rem;
    }

    .pp-card {
        background: var(--pp-card-bg);
        border: 1px solid var(--pp-border);
        border-radius: 12px;
        padding: 0.9rem 1rem;
        box-shadow: var(--pp-shadow);
        margin-bottom: 0.7rem;
    }

    .pp-card-title {
        font-size: 1rem;
        font-weight: 700;
        color: var(--pp-text);
        margin-bottom: 0.2rem;
    }

    .pp-card-subtitle {
        font-size: 0.84rem;
        color: var(--pp-muted);
    }

    .pp-rating {
        font-size: 2.2rem;
        font-weight: 800;
        color: var(--pp-green);
        line-height: 1.1;
    }

    .pp-rating small {
        font-size: 0.95rem;
        color: var(--pp-muted);
        font-weight: 600;
    }

    .pp-draft-pill {
        display: inline-block;
        background: rgba(227, 179, 65, 0.16);
        color: #7A5A0B;
        border-radius: 999px;
        padding: 0.1rem 0.6rem;
        font-size: 0.74rem;
        font-weight: 700;
    }

    .pp-disclaimer {
        margin-top: 1.2rem;
        font-size: 0.76rem;
        color: var(--pp-muted);
        text-align: center;
    }

    [data-testid="stTabs"] button[role="tab"] {
        font-weight: 600;
    }

    .stButton > button {
        border-radius: 10px;
        font-weight: 600;
    }

    @media (max-width: 760px) {
        .block-container {
            padding-left: 0.7rem;
            padding-right: 0.7rem;
        }
        .pp-wordmark {
            font-size: 1.15rem;
        }
    }
    </style>
    """
