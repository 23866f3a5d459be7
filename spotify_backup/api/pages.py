"""Server-rendered HTML pages."""
from html import escape

from spotify_backup.models.restore import PlaylistState, RestoreReport
from spotify_backup.models.transfer import TransferDocument

_HEAD = (
    "<!DOCTYPE html><html><head><meta charset=\"utf-8\">"
    "<title>Spotify Playlist Backup</title></head><body>"
)
_TAIL = "</body></html>"


def _report_summary(report: RestoreReport) -> str:
    rows = []
    for p in report.playlists:
        line = f"{escape(p.name)}: {p.state.value}"
        if p.state == PlaylistState.DONE:
            line += f" ({p.total_tracks_attempted} tracks"
            if p.failed_batches:
                line += f", {len(p.failed_batches)} failed batch(es)"
            if p.skipped:
                line += f", {len(p.skipped)} skipped"
            line += ")"
        rows.append(f"<li>{line}</li>")
    return "<h2>Last restore</h2><ul>" + "".join(rows) + "</ul>"


def render_index(logged_in: bool, has_backup: bool, report: RestoreReport | None = None) -> str:
    links = ['<li><a href="/login">Log in with Spotify and back up playlists</a></li>']
    if has_backup:
        links.append('<li><a href="/download">Download backup</a></li>')
    links.append('<li><a href="/restore">Restore from a backup file</a></li>')
    body = "<h1>Spotify Playlist Backup</h1><ul>" + "".join(links) + "</ul>"
    if logged_in:
        body += '<form method="post" action="/logout"><button type="submit">Log out</button></form>'
    if report is not None:
        body += _report_summary(report)
    return _HEAD + body + _TAIL


def render_playlists(document: TransferDocument) -> str:
    items = []
    for p in document:
        tracks = "".join(
            f"<li>{escape(t.name)} - {escape(t.artist)} ({escape(t.album)})</li>"
            for t in p.tracks
        )
        items.append(
            f"<li><details><summary>{escape(p.name)} ({len(p.tracks)} tracks)</summary>"
            f"<ol>{tracks}</ol></details></li>"
        )
    body = (
        "<h1>Your playlists</h1>"
        '<p><a href="/download">Download backup</a> | <a href="/">Home</a></p>'
        f"<ul>{''.join(items)}</ul>"
    )
    return _HEAD + body + _TAIL


# Polls /progress while the upload request is running
_PROGRESS_SCRIPT = """
<script>
document.getElementById('restoreForm').addEventListener('submit', function () {
  var text = document.getElementById('progressText');
  setInterval(function () {
    fetch('/progress').then(function (r) { return r.json(); }).then(function (data) {
      if (data.progress) {
        text.textContent = data.progress.playlist_name + ': ' +
          Math.round(data.progress.percent_complete) + '%';
      }
    });
  }, 1000);
});
</script>
"""


def render_restore_form() -> str:
    body = (
        "<h1>Restore playlists</h1>"
        '<form id="restoreForm" method="post" action="/restore" enctype="multipart/form-data">'
        '<input type="file" name="backup" accept="application/json">'
        '<button type="submit">Restore</button></form>'
        '<p id="progressText"></p>'
        + _PROGRESS_SCRIPT
    )
    return _HEAD + body + _TAIL
