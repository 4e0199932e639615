"""Met Collection Browser - Streamlit application."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

import requests
import streamlit as st

from met_collection import (
    ClientConfig,
    DecodeError,
    MetClient,
    ObjectOptions,
    SearchOptions,
    StatusError,
    TransportError,
    ValidationError,
)

# Configuration
FETCH_TIMEOUT = 30
IMAGE_TIMEOUT = 30
DEFAULT_FETCH_LIMIT = 25
FETCH_LIMIT_OPTIONS = [10, 25, 50, 100]
ALL_DEPARTMENTS_LABEL = "All departments"
API_DOCS_URL = "https://metmuseum.github.io"

st.set_page_config(page_title="Met Collection Browser", layout="wide")


@dataclass
class LoadResult:
    """Objects loaded for display, plus anything the user should know about."""

    objects: list[dict] = field(default_factory=list)  # ObjectResult.to_dict() output
    total: int = 0  # Search matches before the fetch limit
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


# =============================================================================
# Session State Initialization
# =============================================================================

def init_session_state():
    """Initialize all session state variables."""
    defaults = {
        "images": [],
        "current_idx": 0,
        "loaded": False,
        "debug_logs": [],
        "last_result": None,
        "departments": None,  # list of {"departmentId", "displayName"}
        "departments_failed": False,
        # Filters
        "search_term": "portrait",
        "search_term_last": "portrait",
        "department_filter": ALL_DEPARTMENTS_LABEL,
        "department_filter_last": ALL_DEPARTMENTS_LABEL,
        "highlights_only": False,
        "highlights_only_last": False,
        "on_view_only": False,
        "on_view_only_last": False,
        "media": "",
        "media_last": "",
        "geo_locations": "",
        "geo_locations_last": "",
        "year_from": None,
        "year_from_last": None,
        "year_to": None,
        "year_to_last": None,
        "fetch_limit": DEFAULT_FETCH_LIMIT,
        "fetch_limit_last": DEFAULT_FETCH_LIMIT,
        # Options
        "ssl_bypass": False,
        "ssl_bypass_last": False,
    }
    for key, default in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = default


init_session_state()


# =============================================================================
# Logging
# =============================================================================

def _append_log(level: str, message: str):
    """Append a log entry to session state."""
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    entry = f"{timestamp} | {level:<5} | {message}"
    st.session_state.debug_logs.append(entry)
    # Keep last 200 entries
    st.session_state.debug_logs = st.session_state.debug_logs[-200:]


def log_event(message: str):
    _append_log("INFO", message)


def log_warning(message: str):
    _append_log("WARN", message)


def log_error(message: str):
    _append_log("ERROR", message)


def client_log_callback(level: str, message: str):
    """Callback for the API client to log through our system."""
    _append_log(level, message)


# =============================================================================
# State Management
# =============================================================================

def reset_loaded_state(reason: str):
    """Reset loaded state when filters change."""
    log_event(f"Reload required: {reason}")
    st.session_state.images = []
    st.session_state.current_idx = 0
    st.session_state.loaded = False
    st.session_state.last_result = None


def check_filter_changes():
    """Check if any filters changed and reset state if needed."""
    changes = []

    filter_checks = [
        ("search_term", "search term changed"),
        ("department_filter", "department changed"),
        ("highlights_only", "highlight filter changed"),
        ("on_view_only", "on-view filter changed"),
        ("media", "medium changed"),
        ("geo_locations", "location changed"),
        ("year_from", "year range changed"),
        ("year_to", "year range changed"),
        ("fetch_limit", "fetch limit changed"),
        ("ssl_bypass", "SSL bypass changed"),
    ]

    for key, reason in filter_checks:
        last_key = f"{key}_last"
        if st.session_state.get(key) != st.session_state.get(last_key):
            changes.append(reason)
            st.session_state[last_key] = st.session_state[key]

    if changes:
        unique_reasons = list(dict.fromkeys(changes))
        reset_loaded_state(", ".join(unique_reasons))


# =============================================================================
# Fetching
# =============================================================================

def get_client() -> MetClient:
    """Build a client for the current SSL setting, logging into the debug console."""
    client = MetClient(ClientConfig(
        timeout=FETCH_TIMEOUT,
        verify=not st.session_state.ssl_bypass,
    ))
    client.set_logger(client_log_callback)
    return client


def describe_error(client: MetClient, error: Exception) -> str:
    """Turn a client error into a user-friendly message."""
    if isinstance(error, ValidationError):
        return "Set both ends of the year range, or neither."
    if isinstance(error, StatusError):
        return f"{client.name} returned an error (status {error.status_code}). Try again later."
    if isinstance(error, TransportError):
        return f"Could not reach {client.name}. Check your internet connection."
    if isinstance(error, DecodeError):
        return f"{client.name} sent a response we could not read."
    return f"Unexpected error from {client.name}."


def split_list(text: str) -> list[str] | None:
    """Parse a comma separated text input; empty input means no filter."""
    values = [v.strip() for v in text.split(",") if v.strip()]
    return values or None


def load_departments() -> list[dict]:
    """Fetch the department list once per session.

    A failure is remembered too, so reruns don't block on a dead API; the
    sidebar offers a retry.
    """
    if st.session_state.departments is None:
        client = get_client()
        try:
            result = client.departments()
        except (TransportError, StatusError, DecodeError) as e:
            log_error(f"Department listing failed: {e}")
            st.session_state.departments = []
            st.session_state.departments_failed = True
            return []
        st.session_state.departments = [d.to_dict() for d in result.departments]
        st.session_state.departments_failed = False
    return st.session_state.departments


def selected_department_id() -> int | None:
    label = st.session_state.department_filter
    if label == ALL_DEPARTMENTS_LABEL:
        return None
    for dept in load_departments():
        if dept["displayName"] == label:
            return dept["departmentId"]
    return None


def build_search_options() -> SearchOptions:
    """Translate sidebar state into search options."""
    return SearchOptions(
        q=st.session_state.search_term,
        is_highlight=True if st.session_state.highlights_only else None,
        department_id=selected_department_id(),
        is_on_view=True if st.session_state.on_view_only else None,
        media=split_list(st.session_state.media),
        has_images=True,
        geo_locations=split_list(st.session_state.geo_locations),
        date_begin=st.session_state.year_from,
        date_end=st.session_state.year_to,
    )


def fetch_artworks() -> LoadResult:
    """Search, then fetch object records up to the fetch limit."""
    client = get_client()
    result = LoadResult()
    limit = st.session_state.fetch_limit

    log_event(f"Searching {client.name}...")
    try:
        found = client.search(build_search_options())
    except (ValidationError, TransportError, StatusError, DecodeError) as e:
        result.errors.append(describe_error(client, e))
        log_error(f"Search failed: {e}")
        return result

    result.total = found.total
    missing = 0
    no_image = 0

    for object_id in found.object_ids:
        if len(result.objects) >= limit:
            break
        try:
            obj = client.get_object(ObjectOptions(object_id=object_id))
        except StatusError as e:
            # The search index can list IDs that no longer resolve
            missing += 1
            log_warning(f"Object {object_id} unavailable (status {e.status_code})")
            continue
        except (TransportError, DecodeError) as e:
            result.errors.append(describe_error(client, e))
            log_error(f"Object {object_id} failed: {e}")
            break

        if not obj.image_urls:
            no_image += 1
            continue
        result.objects.append(obj.to_dict())

    if missing > 0:
        result.warnings.append(f"{missing} matching objects could not be loaded.")
    if no_image > 0:
        log_event(f"Skipped {no_image} objects without open access images")

    return result


def download_high_res(image_url: str) -> bytes | None:
    """Download high-resolution image."""
    try:
        response = requests.get(
            image_url,
            timeout=IMAGE_TIMEOUT,
            verify=not st.session_state.ssl_bypass,
        )
        response.raise_for_status()
        return response.content
    except requests.exceptions.RequestException as e:
        log_error(f"Download failed: {e}")
        return None


def create_filename(title: str, object_id: int) -> str:
    """Create a human-readable filename from title and ID."""
    filename_base = f"MET-{title}"

    # Remove invalid filename characters
    for char in ['<', '>', ':', '"', '/', '\\', '|', '?', '*']:
        filename_base = filename_base.replace(char, '')

    filename_base = ' '.join(filename_base.split())[:100].strip()
    return f"{filename_base}-{object_id}.jpg"


# =============================================================================
# UI Components
# =============================================================================

def render_feedback(result: LoadResult | None):
    """Render errors and warnings from the last load."""
    if not result:
        return
    for error in result.errors:
        st.error(error)
    for warning in result.warnings:
        st.warning(warning)


def render_sidebar():
    """Render the sidebar with filters and debug console."""
    with st.sidebar:
        st.subheader("Filters")

        st.text_input("Search term", key="search_term", help="Free text, e.g. sunflowers")

        dept_options = [ALL_DEPARTMENTS_LABEL] + [d["displayName"] for d in load_departments()]
        if st.session_state.department_filter not in dept_options:
            st.session_state.department_filter = ALL_DEPARTMENTS_LABEL
        st.selectbox(
            "Department",
            dept_options,
            key="department_filter",
            help="Filter by curatorial department",
        )
        if st.session_state.departments_failed:
            st.caption("Could not load departments.")
            if st.button("Retry departments"):
                log_event("Department retry requested")
                st.session_state.departments = None
                st.rerun()

        st.checkbox("Highlights only", key="highlights_only")
        st.checkbox("On view only", key="on_view_only")
        st.text_input("Medium", key="media", help="Comma separated, e.g. Paintings, Ceramics")
        st.text_input("Location", key="geo_locations", help="Comma separated, e.g. France, Paris")

        # Year range
        st.markdown("**Year Range**")
        col1, col2 = st.columns(2)
        with col1:
            year_from = st.number_input(
                "From",
                min_value=-8000,
                max_value=2030,
                value=st.session_state.year_from,
                placeholder="Any",
                help="Earliest year (e.g., 1700)",
            )
            st.session_state.year_from = int(year_from) if year_from is not None else None
        with col2:
            year_to = st.number_input(
                "To",
                min_value=-8000,
                max_value=2030,
                value=st.session_state.year_to,
                placeholder="Any",
                help="Latest year (e.g., 1800)",
            )
            st.session_state.year_to = int(year_to) if year_to is not None else None

        st.selectbox("Fetch limit", FETCH_LIMIT_OPTIONS, key="fetch_limit")

        st.caption("Filters apply when you click Load Artworks.")

        st.checkbox("Bypass SSL verification", key="ssl_bypass", help="Use if you encounter SSL errors")

        with st.expander("Debug Console", expanded=False):
            if st.button("Clear Logs"):
                st.session_state.debug_logs = []
            log_text = "\n".join(st.session_state.debug_logs) if st.session_state.debug_logs else "No logs yet."
            st.code(log_text, language=None)


def render_artwork_display(artwork: dict):
    """Render the current artwork display."""
    idx = st.session_state.current_idx
    total = len(st.session_state.images)

    st.caption(f"Object {idx + 1} of {total}")

    col_image, col_meta = st.columns([3, 2], gap="large")

    with col_image:
        st.image(artwork["primaryImageSmall"] or artwork["primaryImage"], use_container_width=True)

    with col_meta:
        st.subheader(artwork["title"] or "Untitled")
        if artwork.get("objectURL"):
            st.caption(f"[View on metmuseum.org]({artwork['objectURL']})")

        meta_left, meta_right = st.columns(2)
        metadata_fields = [
            ("Artist", artwork.get("artistDisplayName")),
            ("Date", artwork.get("objectDate")),
            ("Type", artwork.get("classification")),
            ("Department", artwork.get("department")),
            ("Medium", artwork.get("medium")),
            ("Credit", artwork.get("creditLine")),
            ("Culture", artwork.get("culture")),
            ("Accession #", artwork.get("accessionNumber")),
            ("Gallery", artwork.get("GalleryNumber")),
            ("Tags", [t["term"] for t in artwork.get("tags", [])]),
        ]

        for index, (label, value) in enumerate(metadata_fields):
            if not value:
                continue
            if isinstance(value, list):
                value = ", ".join([str(v) for v in value if v])
            target_col = meta_left if index % 2 == 0 else meta_right
            target_col.write(f"**{label}:** {value}")

        st.markdown("**Actions**")
        col_back, col_skip, col_download = st.columns(3)

        with col_back:
            if st.button("Back", type="secondary", disabled=(idx == 0)):
                st.session_state.current_idx -= 1
                st.rerun()

        with col_skip:
            if st.button("Skip", type="secondary"):
                st.session_state.current_idx += 1
                st.rerun()

        with col_download:
            img_data = download_high_res(artwork["primaryImage"] or artwork["primaryImageSmall"])
            if img_data:
                download_clicked = st.download_button(
                    label="Download",
                    data=img_data,
                    file_name=create_filename(artwork["title"], artwork["objectID"]),
                    mime="image/jpeg",
                    type="primary",
                )
                if download_clicked:
                    log_event(f"Downloaded: {artwork['objectID']}")
                    st.session_state.current_idx += 1
                    st.rerun()
            else:
                st.button("Download", type="primary", disabled=True)

        if artwork.get("dimensions"):
            st.text_area("Dimensions", value=artwork["dimensions"], height=80, disabled=True)
        if artwork.get("rightsAndReproduction"):
            st.text_area("Rights", value=artwork["rightsAndReproduction"], height=60, disabled=True)


# =============================================================================
# Main Application
# =============================================================================

def main():
    """Main application entry point."""
    check_filter_changes()
    render_sidebar()

    st.markdown("### Met Collection Browser")
    st.caption(f"[The Met Collection API]({API_DOCS_URL})")

    if not st.session_state.loaded:
        render_feedback(st.session_state.last_result)

        if st.button("Load Artworks", type="primary"):
            log_event("Load button clicked")
            with st.spinner("Fetching artworks from The Met..."):
                result = fetch_artworks()
                st.session_state.last_result = result

                if result.objects:
                    st.session_state.images = result.objects
                    st.session_state.loaded = True
                    st.rerun()
                else:
                    render_feedback(result)
                    if not result.errors:
                        st.warning("No artworks found matching your filters. Try adjusting the filters.")

        st.caption("Choose filters in the sidebar, then click Load Artworks.")
        st.caption(f"Will fetch up to {st.session_state.fetch_limit} objects.")
        st.stop()

    last = st.session_state.last_result
    if last:
        st.caption(f"{last.total} matching objects")
        render_feedback(last)

    if not st.session_state.images:
        st.warning("No artworks found. Try adjusting your filters.")
        if st.button("Try Loading Again"):
            log_event("Retry load requested")
            st.session_state.loaded = False
            st.rerun()
        st.stop()

    idx = st.session_state.current_idx
    if idx >= len(st.session_state.images):
        st.success("You've reviewed all images!")
        if st.button("Start Over"):
            st.session_state.current_idx = 0
            st.rerun()
        st.stop()

    render_artwork_display(st.session_state.images[idx])


if __name__ == "__main__":
    main()
