"""
Dossier Studio: Streamlit front end.

Thin view layer over the session reducer. Every widget interaction becomes a
session action; all decisions (validation, edits, generation outcomes,
export blocking) live in the dossier package.

Run with:
    streamlit run scripts/gui.py
"""

import streamlit as st
import streamlit.components.v1  # noqa: F401

# MUST be the first Streamlit command
st.set_page_config(layout="wide", page_title="Dossier Studio")

import asyncio
from functools import partial

from dossier.contexts.briefing import BRIEFING_FILENAME, BRIEFING_MIME_TYPE, render_narrative_html
from dossier.contexts.editing import ExperienceSection
from dossier.contexts.editing import operations as ops
from dossier.contexts.editing.spellcheck import activate, apply_suggestion, find_misspellings, load_dictionary
from dossier.contexts.intake import UploadedAttachment
from dossier.contexts.rendering import available_templates, render_print_html, render_resume_html
from dossier.contexts.session import SessionState, Step, reduce, run_export, run_generation
from dossier.contexts.session import state as actions
from dossier.utils.config import get_setting
from dossier.utils.llm import credential_available
from dossier.utils.logger import session_log_dir, setup_logger


@st.cache_resource
def init_logging():
    """Configure file + console logging once per server process."""
    return setup_logger("gui", session_log_dir("gui"), extra_provenance={"LLM provider": get_setting("llm.provider")})


@st.cache_resource
def get_dictionary():
    """Load the spell dictionary once per server process."""
    return load_dictionary()


# Initialize session state variables
if "session" not in st.session_state:
    st.session_state.session = SessionState()
# Bumped on structural edits so list widgets get fresh keys
if "rev" not in st.session_state:
    st.session_state.rev = 0
if "export_result" not in st.session_state:
    st.session_state.export_result = None
if "seen_uploads" not in st.session_state:
    st.session_state.seen_uploads = set()


def dispatch(action, structural: bool = False):
    st.session_state.session = reduce(st.session_state.session, action)
    if structural:
        st.session_state.rev += 1


def edit(operation, structural: bool = False, **kwargs):
    dispatch(actions.EditDocument(partial(operation, **kwargs)), structural)


def key(name: str) -> str:
    return f"{name}-{st.session_state.rev}"


init_logging()
session: SessionState = st.session_state.session
dictionary = get_dictionary() if session.show_spellcheck else None

st.title("Dossier Studio")
st.caption(" → ".join(f"**{s.label}**" if s == session.step else s.label for s in Step))

if not credential_available():
    st.warning("No LLM API key is configured, so generation is unavailable. Set OPENAI_API_KEY or ANTHROPIC_API_KEY.")

if session.error:
    col_msg, col_dismiss = st.columns([6, 1])
    col_msg.error(session.error)
    if col_dismiss.button("Dismiss", key="dismiss_error"):
        dispatch(actions.DismissError())
        st.rerun()


# --- STEP 1: PROVIDE INTEL ---
if session.step == Step.INTAKE:
    st.subheader("1. Provide Intel")
    uploads = st.file_uploader(
        "Upload your resume, bio or other documents", accept_multiple_files=True, key=key("uploader")
    )
    if uploads:
        # Removed attachments stay in the uploader widget; only take files not seen before
        new_files = [f for f in uploads if f.file_id not in st.session_state.seen_uploads]
        st.session_state.seen_uploads.update(f.file_id for f in new_files)
        new = tuple(UploadedAttachment.from_bytes(f.name, f.getvalue(), f.type or None) for f in new_files)
        if new:
            dispatch(actions.AddAttachments(new))
            session = st.session_state.session
    for i, attachment in enumerate(session.attachments):
        col_name, col_remove = st.columns([6, 1])
        col_name.write(f"📄 {attachment.filename}")
        if col_remove.button("Remove", key=f"remove-{i}-{attachment.filename}"):
            dispatch(actions.RemoveAttachment(attachment.filename))
            st.rerun()

    linkedin_url = st.text_input("LinkedIn Profile URL", value=session.linkedin_url)
    if linkedin_url != session.linkedin_url:
        dispatch(actions.SetLinkedinUrl(linkedin_url))

    if st.button("Next: Target JD", type="primary"):
        dispatch(actions.ProceedToJobDescription())
        st.rerun()


# --- STEP 2: TARGET JD ---
elif session.step == Step.TARGET_JD:
    st.subheader("2. Target Job Description")
    job_description = st.text_area("Paste the job description", value=session.job_description, height=300)
    if job_description != session.job_description:
        dispatch(actions.SetJobDescription(job_description))

    col_back, col_go = st.columns(2)
    if col_back.button("Start Over"):
        dispatch(actions.StartOver(), structural=True)
        st.rerun()
    if col_go.button(
        "Generate Dossier",
        type="primary",
        disabled=not job_description.strip() or not credential_available(),
    ):
        with st.spinner("Forging your strategic briefing and dossier..."):
            st.session_state.session = asyncio.run(run_generation(st.session_state.session))
        st.session_state.rev += 1
        st.rerun()


# --- STEP 3: STRATEGIC BRIEFING ---
elif session.step == Step.BRIEFING:
    st.subheader("3. Strategic Briefing")
    st.components.v1.html(render_narrative_html(session.briefing_text), height=800, scrolling=True)
    if session.payload_text and session.document is None:
        with st.expander("Raw dossier payload"):
            st.code(session.payload_text, language="json")

    col_dl, col_new, col_next = st.columns(3)
    col_dl.download_button(
        "Download Briefing",
        data=session.briefing_text,
        file_name=BRIEFING_FILENAME,
        mime=BRIEFING_MIME_TYPE,
    )
    if col_new.button("New Job Description"):
        dispatch(actions.NewJobDescription(), structural=True)
        st.rerun()
    if col_next.button("View Resume", type="primary", disabled=not session.can_view_resume):
        dispatch(actions.ViewResume())
        st.rerun()


# --- STEP 4: RESUME PREVIEW ---
elif session.step == Step.PREVIEW and session.document is not None:
    document = session.document
    report = session.report
    editor, preview = st.columns([2, 3])

    with editor:
        st.subheader("4. Edit Dossier")

        templates = list(available_templates())
        template = st.selectbox("Template", templates, index=templates.index(session.template))
        if template != session.template:
            dispatch(actions.SelectTemplate(template))
            st.rerun()
        if st.toggle("Spellcheck", value=session.show_spellcheck) != session.show_spellcheck:
            dispatch(actions.ToggleSpellcheck())
            st.rerun()

        with st.expander("Contact", expanded=True):
            for name in ops.CONTACT_FIELDS:
                value = st.text_input(name.title(), value=getattr(document.contact_info, name), key=key(name))
                if name in report.contact_info:
                    st.caption(f":red[{report.contact_info[name]}]")
                if value != getattr(document.contact_info, name):
                    edit(ops.set_contact_field, name=name, value=value)

        with st.expander("Executive Summary", expanded=True):
            value = st.text_area("Summary", value=document.executive_summary, key=key("summary"))
            if report.executive_summary:
                st.caption(f":red[{report.executive_summary}]")
            if value != document.executive_summary:
                edit(ops.set_executive_summary, value=value)

        with st.expander("Core Competencies"):
            if report.core_competencies:
                st.caption(f":red[{report.core_competencies}]")
            for i, competency in enumerate(document.core_competencies):
                col_value, col_remove = st.columns([6, 1])
                value = col_value.text_input(f"Competency {i + 1}", value=competency, key=key(f"comp-{i}"))
                if report.competency_error(i):
                    col_value.caption(f":red[{report.competency_error(i)}]")
                if col_remove.button("✕", key=key(f"comp-remove-{i}")):
                    edit(ops.remove_competency, structural=True, index=i)
                    st.rerun()
                if value != competency:
                    edit(ops.set_competency, index=i, value=value)
            if st.button("Add Competency", key=key("comp-add")):
                edit(ops.add_competency, structural=True)
                st.rerun()

        for section in ExperienceSection:
            blocks = ops.optional_blocks(document, section)
            with st.expander(f"{section.value.title()} Experience"):
                for i, block in enumerate(blocks or ()):
                    errors = report.experience_errors(section.value, i)
                    for field_name, label in (("role", "Role"), ("company_info", "Company | Location | Dates")):
                        value = st.text_input(label, value=getattr(block, field_name), key=key(f"{section.value}-{i}-{field_name}"))
                        if getattr(errors, field_name):
                            st.caption(f":red[{getattr(errors, field_name)}]")
                        if value != getattr(block, field_name):
                            edit(ops.set_experience_field, section=section, index=i, name=field_name, value=value)
                    for j, point in enumerate(block.points):
                        col_value, col_remove = st.columns([6, 1])
                        value = col_value.text_area(f"Point {j + 1}", value=point, key=key(f"{section.value}-{i}-p{j}"))
                        if errors.point_error(j):
                            col_value.caption(f":red[{errors.point_error(j)}]")
                        if col_remove.button("✕", key=key(f"{section.value}-{i}-p{j}-remove")):
                            edit(ops.remove_point, structural=True, section=section, index=i, point_index=j)
                            st.rerun()
                        if value != point:
                            edit(ops.set_point, section=section, index=i, point_index=j, value=value)
                    col_add, col_remove = st.columns(2)
                    if col_add.button("Add Point", key=key(f"{section.value}-{i}-add-point")):
                        edit(ops.add_point, structural=True, section=section, index=i)
                        st.rerun()
                    if col_remove.button("Remove Experience", key=key(f"{section.value}-{i}-remove")):
                        edit(ops.remove_experience, structural=True, section=section, index=i)
                        st.rerun()
                    st.divider()
                if st.button(f"Add {section.value.title()} Experience", key=key(f"{section.value}-add")):
                    edit(ops.add_experience, structural=True, section=section)
                    st.rerun()

        with st.expander("Licenses"):
            if document.licenses is None:
                if st.button("Add Licenses Section", key=key("licenses-add")):
                    edit(ops.add_licenses, structural=True)
                    st.rerun()
            else:
                license_errors = report.licenses
                current = {
                    "title": document.licenses.title,
                    "values": ", ".join(document.licenses.values),
                    "status": document.licenses.status,
                }
                for name, text in current.items():
                    value = st.text_input(name.title(), value=text, key=key(f"licenses-{name}"))
                    if license_errors and getattr(license_errors, name):
                        st.caption(f":red[{getattr(license_errors, name)}]")
                    if value != text:
                        edit(ops.set_license_field, name=name, value=value)
                if st.button("Remove Section", key=key("licenses-remove")):
                    edit(ops.remove_licenses, structural=True)
                    st.rerun()

        with st.expander("Theme"):
            palettes = get_setting("theme.palettes")
            current_theme = document.theme or ops.default_theme()
            for name, swatches in palettes.items():
                current_color = getattr(current_theme, name)
                options = swatches if current_color in swatches else [current_color] + swatches
                color = st.selectbox(name.replace("_", " ").title(), options, index=options.index(current_color), key=key(f"theme-{name}"))
                if color != current_color:
                    edit(ops.set_theme_color, name=name, color=color)

        if dictionary is not None:
            with st.expander("Spelling"):
                # (label, current text, operation, operation kwargs without value)
                fields = [("Executive Summary", document.executive_summary, ops.set_executive_summary, {})]
                fields += [
                    (f"Competency {i + 1}", c, ops.set_competency, {"index": i})
                    for i, c in enumerate(document.core_competencies)
                ]
                for section in ExperienceSection:
                    for i, block in enumerate(ops.optional_blocks(document, section) or ()):
                        fields += [
                            (f"{block.role or section.value.title()} point {j + 1}", point, ops.set_point,
                             {"section": section, "index": i, "point_index": j})
                            for j, point in enumerate(block.points)
                        ]
                for n, (label, text, operation, target) in enumerate(fields):
                    spans = find_misspellings(text, dictionary)
                    for m in range(len(spans)):
                        popover = activate(spans, m, dictionary)
                        if popover is None:
                            continue
                        cols = st.columns([2] + [1] * max(len(popover.suggestions), 1))
                        cols[0].write(f"{label}: **{popover.word}**")
                        for col, suggestion in zip(cols[1:], popover.suggestions):
                            if col.button(suggestion, key=key(f"spell-{n}-{popover.anchor}-{suggestion}")):
                                value = apply_suggestion(text, popover.word, suggestion)
                                edit(operation, structural=True, value=value, **target)
                                st.rerun()

    with preview:
        session = st.session_state.session
        st.caption("Preview (read-only). Make changes in the editor panel.")
        st.components.v1.html(
            render_resume_html(
                session.document,
                template=session.template,
                editable=False,
            ),
            height=1100,
            scrolling=True,
        )

        col_export, col_print, col_back, col_new, col_over = st.columns(5)
        if col_export.button("Export PDF", type="primary", disabled=not session.can_export):
            with st.spinner("Rendering PDF..."):
                st.session_state.session, st.session_state.export_result = asyncio.run(
                    run_export(st.session_state.session, dictionary=dictionary)
                )
            st.rerun()
        if session.can_export:
            col_print.download_button(
                "Print View",
                data=render_print_html(session.document, session.template),
                file_name="resume.html",
                mime="text/html",
            )
        if col_back.button("Back to Briefing"):
            dispatch(actions.BackToBriefing())
            st.rerun()
        if col_new.button("New Job Description"):
            dispatch(actions.NewJobDescription(), structural=True)
            st.rerun()
        if col_over.button("Start Over"):
            dispatch(actions.StartOver(), structural=True)
            st.rerun()

        result = st.session_state.export_result
        if result is not None:
            st.download_button(
                f"Download {result.filename} ({result.page_count} pages)",
                data=result.pdf_bytes,
                file_name=result.filename,
                mime="application/pdf",
            )
