"""Minimal browser admin shell that consumes the JSON API."""

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from label_admin.domain.collections import COLLECTIONS

router = APIRouter(tags=["ui"])


@router.get("/ui", response_class=HTMLResponse)
async def admin_ui() -> HTMLResponse:
    """Serve the admin shell; routing and the session gate run in the browser."""
    return HTMLResponse(_render_ui())


def _render_ui() -> str:
    buttons = "\n".join(
        f"      <button onclick=\"go('/{schema.route}')\">"
        f"{schema.name.capitalize()}</button>"
        for schema in COLLECTIONS
    )
    keys = ", ".join(f"'{schema.route}': '{schema.name}'" for schema in COLLECTIONS)
    return (
        _ADMIN_UI_HTML.replace("__NAV_BUTTONS__", buttons)
        .replace("__COLLECTION_KEYS__", keys)
    )


_ADMIN_UI_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>Label Admin</title>
    <style>
      body { font-family: ui-sans-serif, system-ui, sans-serif; margin: 2rem; }
      h1 { margin-bottom: 0.5rem; }
      .row { margin-bottom: 1rem; }
      input { padding: 0.4rem 0.6rem; width: 320px; }
      button { padding: 0.4rem 0.8rem; margin-right: 0.5rem; }
      table { border-collapse: collapse; }
      td, th { border: 1px solid #ddd; padding: 0.3rem 0.5rem; text-align: left; }
      .error { color: #b00020; }
      .hidden { display: none; }
    </style>
  </head>
  <body>
    <h1>Label Admin</h1>
    <div id="loading">Loading...</div>
    <section id="login" class="hidden">
      <div class="row"><input id="username" placeholder="Username" /></div>
      <div class="row">
        <input id="password" type="password" placeholder="Password" />
      </div>
      <button onclick="login()">Log in</button>
      <p id="login-error" class="error"></p>
    </section>
    <section id="app" class="hidden">
      <div class="row">
__NAV_BUTTONS__
        <button onclick="logout()">Log out</button>
      </div>
      <p id="message"></p>
      <div id="output"></div>
    </section>
    <script>
      const AUTH_KEY = 'isAuthenticated';
      const COLLECTION_KEYS = { __COLLECTION_KEYS__ };

      function route() {
        return location.hash.slice(1) || '/';
      }

      function go(path) {
        location.hash = path;
      }

      function show(id) {
        for (const el of ['loading', 'login', 'app']) {
          document.getElementById(el).classList.toggle('hidden', el !== id);
        }
      }

      function checkAuth() {
        show('loading');
        const authenticated = localStorage.getItem(AUTH_KEY) === 'true';
        const path = route();
        if (!authenticated && path !== '/login') {
          go('/login');
          return;
        }
        if (authenticated && path === '/login') {
          go('/');
          return;
        }
        if (path === '/login') {
          show('login');
          return;
        }
        show('app');
        const name = path.slice(1);
        if (COLLECTION_KEYS[name]) {
          loadCollection(name);
        }
      }

      async function login() {
        const error = document.getElementById('login-error');
        error.textContent = '';
        try {
          const res = await fetch('/api/auth/login', {
            method: 'POST',
            headers: { 'Content-Type': 'application/json' },
            body: JSON.stringify({
              username: document.getElementById('username').value,
              password: document.getElementById('password').value,
            }),
          });
          const data = await res.json();
          if (res.ok && data.success) {
            localStorage.setItem(AUTH_KEY, 'true');
            go('/');
            checkAuth();
          } else {
            error.textContent = data.error || 'Invalid credentials';
          }
        } catch (err) {
          error.textContent = 'Network error. Please try again.';
        }
      }

      function logout() {
        localStorage.removeItem(AUTH_KEY);
        go('/login');
      }

      async function loadCollection(name) {
        const output = document.getElementById('output');
        const message = document.getElementById('message');
        output.textContent = 'Loading...';
        message.textContent = '';
        try {
          const res = await fetch('/api/' + name);
          const data = await res.json();
          if (!res.ok) {
            output.textContent = '';
            message.textContent = data.error || 'Something went wrong.';
            return;
          }
          renderTable(data[COLLECTION_KEYS[name]] || []);
        } catch (err) {
          output.textContent = '';
          message.textContent = 'Network error. Please try again.';
        }
      }

      function renderTable(records) {
        const output = document.getElementById('output');
        if (!records.length) {
          output.textContent = 'No records.';
          return;
        }
        const columns = Object.keys(records[0]);
        const table = document.createElement('table');
        const head = table.insertRow();
        for (const column of columns) {
          const th = document.createElement('th');
          th.textContent = column;
          head.appendChild(th);
        }
        for (const record of records) {
          const row = table.insertRow();
          for (const column of columns) {
            const value = record[column];
            const cell = row.insertCell();
            if (typeof value === 'string' && value.startsWith('data:image/')) {
              const img = document.createElement('img');
              img.src = value;
              img.width = 48;
              cell.appendChild(img);
            } else {
              cell.textContent =
                typeof value === 'object' ? JSON.stringify(value) : String(value);
            }
          }
        }
        output.replaceChildren(table);
      }

      window.addEventListener('hashchange', checkAuth);
      window.addEventListener('storage', checkAuth);
      checkAuth();
    </script>
  </body>
</html>
"""
