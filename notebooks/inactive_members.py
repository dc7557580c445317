# /// script
# requires-python = ">=3.11"
# dependencies = [
#     "marimo",
#     "polars",
#     "altair",
#     "member-audit",
# ]
# ///
"""
Inactive Members

Reconcile the partition reports written by `member-audit scan`:
- Upload all_members.csv and every active_users_for_repos-*.csv
- Check that the reports cover every repository row
- List members that appear in none of the reports
"""

import marimo


__generated_with = "0.18.4"
app = marimo.App(width="medium")


# ============================================================
# Cell 1: Imports
# ============================================================
@app.cell(hide_code=True)
def _():
    import io

    import altair as alt
    import marimo as mo
    import polars as pl

    from member_audit.reconcile import find_inactive_logins, missing_rows
    from member_audit.reports import parse_active_report_name

    return (
        alt,
        find_inactive_logins,
        io,
        missing_rows,
        mo,
        parse_active_report_name,
        pl,
    )


# ============================================================
# Cell 2: Title
# ============================================================
@app.cell(hide_code=True)
def _(mo):
    mo.md(r"""
    # 💤 Inactive Members

    Each scan only knows who was active in its own range of repositories.
    A member is inactive when no partition report lists them.

    **Inputs:**
    1. **all_members.csv** - roster snapshot written by every scan
    2. **active_users_for_repos-\*.csv** - one report per scanned range
    3. **repositories.csv** - optional, used to check range coverage
    """)


# ============================================================
# Cell 3: File Uploads
# ============================================================
@app.cell(hide_code=True)
def _(mo):
    members_upload = mo.ui.file(
        filetypes=[".csv"],
        multiple=False,
        label="👥 all_members.csv",
    )

    reports_upload = mo.ui.file(
        filetypes=[".csv"],
        multiple=True,
        label="📋 active_users_for_repos-*.csv (select all)",
    )

    repositories_upload = mo.ui.file(
        filetypes=[".csv"],
        multiple=False,
        label="📦 repositories.csv (optional)",
    )

    mo.vstack(
        [
            mo.md("## 📁 Upload reports"),
            members_upload,
            reports_upload,
            repositories_upload,
        ],
        gap=1,
    )
    return members_upload, reports_upload, repositories_upload


# ============================================================
# Cell 4: Parse Uploads
# ============================================================
@app.cell(hide_code=True)
def _(io, members_upload, parse_active_report_name, pl, reports_upload):
    def read_upload(file_info, columns: dict) -> pl.DataFrame:
        return pl.read_csv(io.BytesIO(file_info.contents), schema_overrides=columns)

    members_df = None
    if members_upload.value:
        members_df = read_upload(
            members_upload.value[0], {"login": pl.Utf8, "email": pl.Utf8}
        )

    active_sets = []
    report_ranges = []
    for _report in reports_upload.value or []:
        _df = read_upload(_report, {"login": pl.Utf8, "email": pl.Utf8})
        active_sets.append(set(_df["login"].drop_nulls().to_list()))
        _range = parse_active_report_name(_report.name)
        if _range is not None:
            report_ranges.append(_range)
    return active_sets, members_df, read_upload, report_ranges


# ============================================================
# Cell 5: Validation Check
# ============================================================
@app.cell(hide_code=True)
def _(active_sets, members_df, mo):
    mo.stop(
        members_df is None or not active_sets,
        mo.md("""
⚠️ **Upload the roster and at least one active report**
        """),
    )


# ============================================================
# Cell 6: Coverage
# ============================================================
@app.cell(hide_code=True)
def _(missing_rows, mo, pl, read_upload, report_ranges, repositories_upload):
    coverage_status = mo.md("ℹ️ Upload repositories.csv to check range coverage")

    if repositories_upload.value:
        _repos = read_upload(repositories_upload.value[0], {"repositories": pl.Utf8})
        _total = _repos.height
        _gaps = missing_rows(
            [(r.start_row + 1, r.finish_row + 1) for r in report_ranges], _total
        )
        if _gaps:
            _shown = ", ".join(str(g) for g in _gaps[:20])
            coverage_status = mo.callout(
                mo.md(
                    f"**{len(_gaps)} of {_total} repository rows are not covered** "
                    f"(rows {_shown}{', ...' if len(_gaps) > 20 else ''}). "
                    "Members may be reported inactive only because their "
                    "repositories were never scanned."
                ),
                kind="warn",
            )
        else:
            coverage_status = mo.callout(
                mo.md(f"✅ All {_total} repository rows are covered"), kind="success"
            )

    coverage_status
    return (coverage_status,)


# ============================================================
# Cell 7: Reconcile
# ============================================================
@app.cell(hide_code=True)
def _(active_sets, find_inactive_logins, members_df, pl):
    inactive_logins = find_inactive_logins(members_df["login"].to_list(), active_sets)

    member_summary = members_df.with_columns(
        pl.col("login").is_in(inactive_logins).not_().alias("active")
    )
    inactive_df = member_summary.filter(~pl.col("active")).select(["login", "email"])
    return inactive_df, inactive_logins, member_summary


# ============================================================
# Cell 8: Summary
# ============================================================
@app.cell(hide_code=True)
def _(active_sets, alt, inactive_df, member_summary, mo, pl):
    _total = member_summary.height
    _inactive = inactive_df.height
    _ratio = _inactive / _total * 100 if _total > 0 else 0

    summary_md = mo.md(f"""
## 📊 Summary

| Item | Value |
|------|-------|
| **Reports reconciled** | {len(active_sets)} |
| **Members** | {_total:,} |
| **Inactive members** | {_inactive:,} ({_ratio:.1f}%) |
    """)

    status_counts = (
        member_summary.with_columns(
            pl.when(pl.col("active"))
            .then(pl.lit("active"))
            .otherwise(pl.lit("inactive"))
            .alias("status")
        )
        .group_by("status")
        .agg(pl.len().alias("count"))
    )

    status_chart = (
        alt.Chart(alt.Data(values=status_counts.to_dicts()))
        .mark_bar()
        .encode(
            x=alt.X("status:N", title="Status"),
            y=alt.Y("count:Q", title="Members"),
            color=alt.Color(
                "status:N",
                scale=alt.Scale(domain=["inactive", "active"], range=["#e74c3c", "#27ae60"]),
                legend=None,
            ),
            tooltip=["status:N", "count:Q"],
        )
        .properties(width=300, height=200)
    )

    mo.vstack([summary_md, status_chart], gap=1)
    return status_chart, status_counts, summary_md


# ============================================================
# Cell 9: Inactive Members Table
# ============================================================
@app.cell(hide_code=True)
def _(inactive_df, mo):
    mo.vstack(
        [
            mo.md("## 💤 Inactive members"),
            mo.ui.table(inactive_df, selection=None),
            mo.download(
                data=inactive_df.write_csv().encode("utf-8"),
                filename="inactive_members.csv",
                mimetype="text/csv",
                label="Download inactive_members.csv",
            ),
        ],
        gap=1,
    )


if __name__ == "__main__":
    app.run()
