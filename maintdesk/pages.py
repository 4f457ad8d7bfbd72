# maintdesk/pages.py
"""
Server-rendered HTML for the two views.

Styling uses Tailwind utility classes from the CDN build; badge classes come
from maintdesk.listing so the colours live in one place.
"""

import json
from datetime import date
from html import escape
from typing import List, Optional

from maintdesk.forms import RequestForm
from maintdesk.listing import RequestCard, RequestList
from maintdesk.navigation import Navigator

PAGE_BG = "min-h-screen bg-gradient-to-br from-blue-50 to-gray-100 py-8 px-4"
HEADER_BG = "bg-gradient-to-r from-blue-600 to-blue-700 px-8 py-6"
PRIMARY_BUTTON = ("bg-gradient-to-r from-blue-600 to-blue-700 text-white px-6 py-3 "
                  "rounded-lg font-semibold hover:from-blue-700 hover:to-blue-800 "
                  "transition-all inline-flex items-center gap-2")
INPUT = "w-full px-4 py-3 border rounded-lg focus:ring-2 focus:ring-blue-500 focus:border-transparent"
INPUT_OK = INPUT + " border-gray-300"
INPUT_ERR = INPUT + " border-red-500"
LABEL = "block text-sm font-semibold text-gray-700 mb-2"

LOADING_MARKER = 'data-loading="true"'
EMPTY_MARKER = 'data-empty="true"'


def _layout(title: str, body: str, head_extra: str = "") -> str:
    return f"""<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{escape(title)}</title>
<script src="https://cdn.tailwindcss.com"></script>
{head_extra}
</head>
<body>
{body}
</body>
</html>
"""


def _e(value: Optional[str]) -> str:
    return escape(value or "", quote=True)


# ---------------------------------------------------------------------------
# Request list
# ---------------------------------------------------------------------------
def render_list_page(nav: Navigator, cards_url: str) -> str:
    """List shell: header plus a spinner that is swapped for the cards once fetched."""
    new_request_path = nav.to_form().path
    body = f"""
<div class="{PAGE_BG}">
  <div class="max-w-7xl mx-auto">
    <div class="bg-white rounded-xl shadow-lg overflow-hidden">
      <div class="{HEADER_BG} flex justify-between items-center">
        <div>
          <h1 class="text-3xl font-bold text-white">My Maintenance Requests</h1>
          <p class="text-blue-100 mt-2">View and track your submitted requests</p>
        </div>
        <a href="{_e(new_request_path)}" class="bg-white text-blue-600 px-6 py-3 rounded-lg font-semibold hover:bg-blue-50 shadow-md">+ New Request</a>
      </div>
      <div class="p-8" id="requests">
        <div class="flex justify-center items-center py-12" {LOADING_MARKER}>
          <div class="animate-spin rounded-full h-12 w-12 border-b-2 border-blue-600"></div>
        </div>
      </div>
    </div>
  </div>
</div>
<script>
fetch({json.dumps(cards_url)}).then(r => r.text()).then(html => {{
  document.getElementById('requests').innerHTML = html;
}});
</script>
"""
    return _layout("My Maintenance Requests", body)


def render_empty_state(nav: Navigator) -> str:
    return f"""<div class="text-center py-12" {EMPTY_MARKER}>
  <h3 class="text-xl font-semibold text-gray-600 mb-2">No requests yet</h3>
  <p class="text-gray-500 mb-6">Create your first maintenance request to get started</p>
  <a href="{_e(nav.to_form().path)}" class="{PRIMARY_BUTTON}">+ Create Request</a>
</div>"""


def render_card(card: RequestCard) -> str:
    category = ""
    if card.category_name:
        category = f'<div class="text-sm text-gray-500">Category: {_e(card.category_name)}</div>'
    team = ""
    if card.team_name:
        team = f"""
  <div class="mt-4 flex items-center gap-2 text-sm text-gray-600">
    <span class="font-semibold">Assigned Team:</span>
    <span class="bg-blue-50 text-blue-700 px-3 py-1 rounded-full">{_e(card.team_name)}</span>
  </div>"""
    return f"""<div class="border border-gray-200 rounded-lg p-6 hover:shadow-md transition-all bg-white" data-request-id="{_e(card.id)}">
  <div class="flex justify-between items-start mb-4">
    <div class="flex-1">
      <h3 class="text-xl font-bold text-gray-800 mb-2">{_e(card.title)}</h3>
      <div class="text-gray-600 mb-2"><span class="font-medium">{_e(card.equipment_name)}</span></div>
      {category}
    </div>
    <div class="flex gap-2">
      <span class="px-3 py-1 rounded-full text-xs font-semibold border {card.status_class}">{_e(card.status_label)}</span>
      <span class="px-3 py-1 rounded-full text-xs font-semibold border {card.priority_class}">{_e(card.priority_label)}</span>
    </div>
  </div>
  <div class="grid grid-cols-1 md:grid-cols-3 gap-4 mb-4 text-sm text-gray-600">
    <span>Scheduled: {_e(card.scheduled)}</span>
    <span>Created: {_e(card.created)}</span>
    <span>Type: {_e(card.request_type)}</span>
  </div>
  <div class="bg-gray-50 rounded-lg p-4">
    <p class="text-sm font-semibold text-gray-700 mb-1">Description:</p>
    <p class="text-gray-600">{_e(card.description)}</p>
  </div>{team}
</div>"""


def render_list_fragment(listing: RequestList) -> str:
    if listing.is_empty:
        return render_empty_state(listing.navigator)
    cards = "\n".join(render_card(c) for c in listing.cards())
    return f'<div class="grid gap-6">\n{cards}\n</div>'


# ---------------------------------------------------------------------------
# Request form
# ---------------------------------------------------------------------------
def _error(form: RequestForm, field: str) -> str:
    msg = form.errors.get(field)
    if not msg:
        return ""
    return f'<p class="text-red-500 text-sm mt-1" data-error-for="{field}">{_e(msg)}</p>'


def _input_class(form: RequestForm, field: str) -> str:
    return INPUT_ERR if form.errors.get(field) else INPUT_OK


def _equipment_options(form: RequestForm) -> str:
    opts: List[str] = ['<option value="">Select equipment...</option>']
    for eq in form.equipment:
        selected = " selected" if eq.id == form.data.equipment_id else ""
        category = eq.category.name if eq.category else "N/A"
        team = eq.team.name if eq.team else "N/A"
        opts.append(
            f'<option value="{_e(eq.id)}" data-category="{_e(category)}" '
            f'data-team="{_e(team)}"{selected}>{_e(eq.name)}</option>'
        )
    return "\n".join(opts)


def _selected_equipment_details(form: RequestForm) -> str:
    eq = form.selected_equipment
    hidden = "" if eq else " hidden"
    category = (eq.category.name if eq and eq.category else "N/A")
    team = (eq.team.name if eq and eq.team else "N/A")
    return f"""<div id="equipment-details" class="md:col-span-2 grid grid-cols-1 md:grid-cols-2 gap-6{hidden}">
  <div>
    <label class="{LABEL}">Equipment Category</label>
    <input id="equipment-category" type="text" value="{_e(category)}" readonly class="{INPUT_OK} bg-gray-50 text-gray-600">
  </div>
  <div>
    <label class="{LABEL}">Maintenance Team</label>
    <input id="equipment-team" type="text" value="{_e(team)}" readonly class="{INPUT_OK} bg-gray-50 text-gray-600">
  </div>
</div>"""


def _radio(form: RequestForm, value: str, label: str) -> str:
    checked = " checked" if form.data.request_type == value else ""
    return (f'<label class="flex items-center gap-2"><input type="radio" name="request_type" '
            f'value="{value}"{checked}> <span>{label}</span></label>')


def _priority_options(form: RequestForm) -> str:
    out = []
    for value, label in (("low", "Low"), ("medium", "Medium"), ("high", "High")):
        selected = " selected" if form.data.priority == value else ""
        out.append(f'<option value="{value}"{selected}>{label}</option>')
    return "\n".join(out)


def render_form_page(form: RequestForm, action_path: str, today: Optional[date] = None) -> str:
    today = today or date.today()
    d = form.data
    alert_script = ""
    if form.alert:
        alert_script = f"<script>window.addEventListener('load', () => alert({json.dumps(form.alert)}));</script>"
    body = f"""
<div class="{PAGE_BG}">
  <div class="max-w-4xl mx-auto">
    <div class="bg-white rounded-xl shadow-lg overflow-hidden">
      <div class="{HEADER_BG}">
        <h1 class="text-3xl font-bold text-white">Raise Maintenance Request</h1>
        <p class="text-blue-100 mt-2">Submit a new maintenance request for equipment</p>
      </div>
      <form method="post" action="{_e(action_path)}" class="p-8 space-y-6" novalidate>
        <div class="grid grid-cols-1 md:grid-cols-2 gap-6">
          <div class="md:col-span-2">
            <label class="{LABEL}" for="title">Request Title / Subject *</label>
            <input id="title" name="title" type="text" value="{_e(d.title)}" placeholder="Enter request title" class="{_input_class(form, 'title')}">
            {_error(form, 'title')}
          </div>
          <div class="md:col-span-2">
            <label class="{LABEL}" for="equipment_id">Equipment *</label>
            <select id="equipment_id" name="equipment_id" class="{_input_class(form, 'equipment_id')}">
{_equipment_options(form)}
            </select>
            {_error(form, 'equipment_id')}
          </div>
          {_selected_equipment_details(form)}
          <div class="md:col-span-2">
            <label class="{LABEL}">Request Type *</label>
            <div class="flex gap-6">
              {_radio(form, 'corrective', 'Corrective (Breakdown)')}
              {_radio(form, 'preventive', 'Preventive (Routine)')}
            </div>
            {_error(form, 'request_type')}
          </div>
          <div>
            <label class="{LABEL}" for="scheduled_date">Scheduled Date *</label>
            <input id="scheduled_date" name="scheduled_date" type="date" value="{_e(d.scheduled_date)}" min="{today.isoformat()}" class="{_input_class(form, 'scheduled_date')}">
            {_error(form, 'scheduled_date')}
          </div>
          <div>
            <label class="{LABEL}" for="priority">Priority *</label>
            <select id="priority" name="priority" class="{_input_class(form, 'priority')}">
{_priority_options(form)}
            </select>
            {_error(form, 'priority')}
          </div>
          <div class="md:col-span-2">
            <label class="{LABEL}" for="description">Description *</label>
            <textarea id="description" name="description" rows="4" placeholder="Describe the maintenance issue or request in detail..." class="{_input_class(form, 'description')}">{_e(d.description)}</textarea>
            {_error(form, 'description')}
          </div>
          <div class="md:col-span-2">
            <label class="{LABEL}" for="attachment_url">Attachment URL (Optional)</label>
            <input id="attachment_url" name="attachment_url" type="url" value="{_e(d.attachment_url)}" placeholder="https://example.com/image.jpg" class="{INPUT_OK}">
          </div>
        </div>
        <div class="flex gap-4 pt-4">
          <button type="submit" name="action" value="submit" class="{PRIMARY_BUTTON} flex-1 justify-center">Submit Request</button>
          <button type="submit" name="action" value="reset" formnovalidate class="px-6 py-3 border-2 border-gray-300 text-gray-700 rounded-lg font-semibold hover:bg-gray-50">Reset Form</button>
        </div>
      </form>
    </div>
  </div>
</div>
<script>
document.getElementById('equipment_id').addEventListener('change', (ev) => {{
  const opt = ev.target.selectedOptions[0];
  const details = document.getElementById('equipment-details');
  if (!opt || !opt.value) {{ details.classList.add('hidden'); return; }}
  document.getElementById('equipment-category').value = opt.dataset.category;
  document.getElementById('equipment-team').value = opt.dataset.team;
  details.classList.remove('hidden');
}});
</script>
{alert_script}
"""
    return _layout("Raise Maintenance Request", body)


def render_success_page(form: RequestForm) -> str:
    """Acknowledgment shown for form.success_delay seconds, then back to the list."""
    target = form.next_view.path
    refresh = f'<meta http-equiv="refresh" content="{form.success_delay:g};url={_e(target)}">'
    body = f"""
<div class="min-h-screen bg-gradient-to-br from-blue-50 to-gray-100 flex items-center justify-center p-4">
  <div class="bg-white rounded-xl shadow-lg p-8 max-w-md w-full text-center" data-success="true">
    <h2 class="text-2xl font-bold text-gray-800 mb-2">Request Submitted!</h2>
    <p class="text-gray-600">Your maintenance request has been created successfully.</p>
  </div>
</div>
"""
    return _layout("Request Submitted", body, head_extra=refresh)
