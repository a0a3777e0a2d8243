import asyncio
import json
import logging
import sys
from typing import Optional

from quart import Quart, Response, jsonify, render_template_string, request

from video_summarizer.config import Settings
from video_summarizer.errors import ErrorCategory, SummarizationError
from video_summarizer.form import SummaryForm, validate_video_url
from video_summarizer.progress import INTERVAL_SECONDS, ProgressSimulation
from video_summarizer.summarizer import MULTI, VARIANTS, Summarizer, VideoSummary
from video_summarizer.urls import extract_video_id

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(funcName)s:%(lineno)d - %(message)s"

STATUS_BY_CATEGORY = {
    ErrorCategory.INVALID_URL: 400,
    ErrorCategory.TRANSCRIPT: 404,
    ErrorCategory.PERMISSION: 403,
    ErrorCategory.QUOTA: 429,
    ErrorCategory.GENERIC: 500,
}

DISCLAIMER = (
    "These summaries are generated based on the video's transcript "
    "and may not capture all nuances of the video content."
)

PAGE_TEMPLATE = """<!doctype html>
<html lang="en">
<head><meta charset="utf-8"><title>AI Video Summarizer</title></head>
<body>
<main>
  <h1>AI Video Summarizer</h1>
  <form method="post" action="/">
    <label for="video_url">YouTube Video URL</label>
    <input id="video_url" name="video_url" value="{{ form.url }}" placeholder="https://www.youtube.com/watch?v=...">
    <p>Enter the URL of the YouTube video you want to summarize.
       The video must have captions available for the best results.</p>
    {% if form.validation_error %}<p class="field-error">{{ form.validation_error }}</p>{% endif %}
    <button type="submit">{{ form.submit_label }}</button>
  </form>
  {% if form.error %}
  <section class="error">
    <h2>Error</h2>
    <p>{{ form.error }}</p>
    {% if form.error_hint %}<p>{{ form.error_hint }}</p>{% endif %}
  </section>
  {% endif %}
  {% if summary %}
  <section class="results">
    <h2>Short Summary</h2>
    <p style="white-space: pre-line">{{ summary.short_summary }}</p>
    <h2>Long Summary</h2>
    <p style="white-space: pre-line">{{ summary.long_summary }}</p>
    <h2>Key Points</h2>
    <ul>{% for point in summary.key_points %}<li>{{ point }}</li>{% endfor %}</ul>
    <p class="disclaimer">{{ disclaimer }}</p>
  </section>
  {% elif text_summary %}
  <section class="results">
    <h2>Summary</h2>
    <p style="white-space: pre-line">{{ text_summary }}</p>
    <p class="disclaimer">{{ disclaimer }}</p>
  </section>
  {% endif %}
</main>
</body>
</html>
"""


def configure_logging(level=logging.INFO) -> None:
    package_logger = logging.getLogger("video_summarizer")
    package_logger.setLevel(level)
    if not package_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)


def log_abandoned_result(task: "asyncio.Future") -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.warning(f"Summary for a disconnected stream failed: {exc}")
    else:
        logger.info("Summary for a disconnected stream finished")


def sse_event(payload: dict, event: Optional[str] = None) -> str:
    prefix = f"event: {event}\n" if event else ""
    return f"{prefix}data: {json.dumps(payload)}\n\n"


def error_payload(exc: SummarizationError) -> dict:
    message = str(exc)
    return {
        "error": message,
        "status_code": STATUS_BY_CATEGORY.get(exc.category, 500),
        "retryable": exc.category is ErrorCategory.QUOTA or "try again" in message,
    }


def result_payload(video_id: str, result) -> dict:
    if isinstance(result, VideoSummary):
        return {"video_id": video_id, **result.to_dict()}
    return {"video_id": video_id, "summary": result}


async def parse_summary_request():
    """Return (url, variant, error_response) for a JSON summarize request."""
    data = await request.get_json(silent=True)
    if not data or not isinstance(data, dict):
        return None, None, (jsonify({"error": "Invalid JSON payload"}), 400)

    video_url = data.get("url")
    if not video_url or not isinstance(video_url, str):
        return None, None, (jsonify({"error": "URL parameter is required"}), 400)

    variant = data.get("variant", MULTI)
    if variant not in VARIANTS:
        return None, None, (
            jsonify({"error": f"variant must be one of: {', '.join(VARIANTS)}"}),
            400,
        )

    validation_error = validate_video_url(video_url.strip())
    if validation_error:
        return None, None, (jsonify({"error": validation_error}), 400)
    return video_url.strip(), variant, None


async def stream_summary(summarizer: Summarizer, url: str, variant: str):
    """Server-sent events: metadata, progress ticks, then the result or an error."""
    progress = ProgressSimulation()
    task = None
    video_id = extract_video_id(url)
    try:
        yield sse_event({"video_id": video_id}, "metadata")

        progress.start()
        task = asyncio.ensure_future(summarizer.summarize(url, variant))
        while not task.done():
            yield sse_event(
                {"progress": progress.value(), "caption": progress.caption()},
                "progress",
            )
            await asyncio.wait({task}, timeout=INTERVAL_SECONDS)

        result = task.result()
        progress.complete()
        yield sse_event(
            {"progress": progress.value(), "caption": progress.caption()},
            "progress",
        )
        yield sse_event(result_payload(video_id, result))
        yield sse_event({"message": "Summary stream finished"}, "stream_end")

    except SummarizationError as e:
        yield sse_event(error_payload(e), "error")
    except Exception as e:
        logger.error(f"Error during /summarize/stream generation: {str(e)}")
        yield sse_event(
            {
                "error": "An unexpected error occurred during streaming.",
                "status_code": 500,
            },
            "error",
        )
    finally:
        progress.stop()
        if task is not None and not task.done():
            # The client went away; let the summary finish but still collect its outcome
            task.add_done_callback(log_abandoned_result)


def create_app(
    summarizer: Optional[Summarizer] = None, settings: Optional[Settings] = None
) -> Quart:
    configure_logging()
    if summarizer is None:
        summarizer = Summarizer.from_settings(settings or Settings.from_env())

    app = Quart(__name__)

    @app.route("/health")
    async def health():
        return "Hello World - Video Summarizer API"

    @app.route("/", methods=["GET"])
    async def index():
        form = SummaryForm(summarizer)
        return await render_template_string(
            PAGE_TEMPLATE, form=form, summary=None, text_summary=None,
            disclaimer=DISCLAIMER,
        )

    @app.route("/", methods=["POST"])
    async def submit_form():
        fields = await request.form
        form = SummaryForm(summarizer)
        await form.submit(fields.get("video_url", ""))
        summary = form.result if isinstance(form.result, VideoSummary) else None
        text_summary = form.result if isinstance(form.result, str) else None
        # Summarization failures are rendered in the error panel, not as HTTP errors
        status = 400 if form.validation_error else 200
        body = await render_template_string(
            PAGE_TEMPLATE, form=form, summary=summary, text_summary=text_summary,
            disclaimer=DISCLAIMER,
        )
        return body, status

    @app.route("/summarize", methods=["POST"])
    async def summarize():
        url, variant, error_response = await parse_summary_request()
        if error_response:
            return error_response

        try:
            result = await summarizer.summarize(url, variant)
        except SummarizationError as e:
            payload = error_payload(e)
            return jsonify(payload), payload["status_code"]
        except Exception as e:
            logger.error(f"Unexpected error in /summarize: {str(e)}")
            return jsonify({"error": f"An error occurred: {str(e)}"}), 500

        return jsonify(result_payload(extract_video_id(url), result))

    @app.route("/summarize/stream", methods=["POST"])
    async def summarize_stream():
        url, variant, error_response = await parse_summary_request()
        if error_response:
            return error_response

        response = Response(
            stream_summary(summarizer, url, variant), mimetype="text/event-stream"
        )
        response.headers["Cache-Control"] = "no-cache"
        return response

    return app


def main():
    settings = Settings.from_env()
    app = create_app(settings=settings)
    logger.info("Starting Quart app...")
    app.run(host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
