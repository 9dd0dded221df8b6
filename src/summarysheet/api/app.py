"""FastAPI application entrypoint."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.responses import HTMLResponse

from summarysheet.api.routes import router

INDEX_HTML = """
<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>Summary Sheet</title>
    <style>
      :root {
        color-scheme: light;
        font-family: system-ui, -apple-system, BlinkMacSystemFont, "Segoe UI", sans-serif;
        --color-paper: #fafaf7;
        --color-ink: #1f2933;
        --color-accent: #2f6fed;
        --color-muted: #6b7280;
        background: var(--color-paper);
        color: var(--color-ink);
      }

      body {
        margin: 0;
        min-height: 100vh;
      }

      main {
        max-width: 760px;
        margin: 0 auto;
        padding: 48px 24px 64px;
        display: grid;
        gap: 24px;
      }

      h1 {
        margin: 0;
        font-size: 2rem;
      }

      p {
        margin: 0;
        color: var(--color-muted);
        line-height: 1.5;
      }

      .row {
        display: flex;
        gap: 12px;
        flex-wrap: wrap;
      }

      input,
      textarea {
        flex: 1;
        font: inherit;
        padding: 12px 14px;
        border-radius: 12px;
        border: 1px solid #d1d5db;
        background: white;
      }

      textarea {
        min-height: 220px;
        width: 100%;
        box-sizing: border-box;
      }

      button {
        appearance: none;
        border: none;
        border-radius: 12px;
        padding: 12px 20px;
        font: inherit;
        font-weight: 600;
        cursor: pointer;
        background: var(--color-accent);
        color: white;
      }

      button:disabled {
        opacity: 0.6;
        cursor: wait;
      }

      .status {
        min-height: 24px;
        font-weight: 600;
        color: var(--color-accent);
      }

      .preview img {
        width: 100%;
        border: 1px solid #e5e7eb;
        box-shadow: 0 12px 30px rgba(31, 41, 51, 0.12);
      }
    </style>
  </head>
  <body>
    <main>
      <header>
        <h1>Summary Sheet</h1>
        <p>Paste an article link, review the bullet-point summary and download it as an A4 page.</p>
      </header>

      <div class="row">
        <input id="url" type="url" placeholder="https://example.com/article" />
        <button id="summarize">Summarize</button>
      </div>

      <div class="status" id="status"></div>

      <textarea id="summary" placeholder="- Bullet points appear here"></textarea>

      <div class="row">
        <button data-refine="shorter">Shorter</button>
        <button data-refine="longer">Longer</button>
        <button data-refine="rewrite">Rewrite</button>
        <button id="save">Save edits</button>
      </div>

      <div class="row">
        <input id="headline" placeholder="Headline" />
        <input id="subheadline" placeholder="Subheadline" />
        <button id="png">Create PNG</button>
      </div>

      <div class="preview" id="preview"></div>
    </main>

    <script>
      let summaryId = null;
      const statusEl = document.getElementById("status");
      const summaryEl = document.getElementById("summary");

      async function call(method, path, body) {
        statusEl.textContent = "Working…";
        const response = await fetch(path, {
          method,
          headers: { "Content-Type": "application/json" },
          body: body ? JSON.stringify(body) : undefined,
        });
        const payload = await response.json();
        if (!response.ok) {
          statusEl.textContent = payload.detail || "Request failed.";
          throw new Error(statusEl.textContent);
        }
        statusEl.textContent = "";
        return payload;
      }

      document.getElementById("summarize").addEventListener("click", async () => {
        const url = document.getElementById("url").value.trim();
        const summary = await call("POST", "/api/summaries", { url });
        summaryId = summary.id;
        summaryEl.value = summary.summary_text;
      });

      document.getElementById("save").addEventListener("click", async () => {
        if (!summaryId) return;
        const summary = await call("PATCH", `/api/summaries/${summaryId}`, {
          summary_text: summaryEl.value,
        });
        summaryEl.value = summary.summary_text;
        statusEl.textContent = "Saved.";
      });

      document.querySelectorAll("[data-refine]").forEach((button) => {
        button.addEventListener("click", async () => {
          if (!summaryId) return;
          const summary = await call("POST", `/api/summaries/${summaryId}/refine`, {
            option: button.dataset.refine,
          });
          summaryEl.value = summary.summary_text;
        });
      });

      document.getElementById("png").addEventListener("click", async () => {
        if (!summaryId) return;
        const result = await call("POST", `/api/summaries/${summaryId}/png`, {
          headline: document.getElementById("headline").value,
          subheadline: document.getElementById("subheadline").value,
        });
        const preview = document.getElementById("preview");
        preview.innerHTML = "";
        const link = document.createElement("a");
        link.href = result.image;
        link.download = "summary.png";
        const image = document.createElement("img");
        image.src = result.image;
        image.alt = "Summary page preview";
        link.appendChild(image);
        preview.appendChild(link);
        if (result.clipped) {
          statusEl.textContent = result.message;
        }
      });
    </script>
  </body>
</html>
"""


def create_app() -> FastAPI:
    app = FastAPI(title="Summary Sheet")
    app.include_router(router, prefix="/api")

    @app.get("/", response_class=HTMLResponse)
    async def index() -> str:
        return INDEX_HTML

    return app


app = create_app()
