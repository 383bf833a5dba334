from flask import Flask, request
import logging

from translator_bot import TranslationPipeline, configure_logging, load_settings
from translator_bot.config import log_effective_style

logger = logging.getLogger(__name__)


def create_app(settings=None, pipeline=None):
    # --- 설정 (키가 없으면 여기서 ConfigError로 중단) ---
    if pipeline is None:
        settings = settings or load_settings()
        configure_logging(settings.debug)
        log_effective_style(settings.style)
        pipeline = TranslationPipeline(settings)

    app = Flask(__name__)
    app.config["PIPELINE"] = pipeline

    @app.route("/", methods=["GET"])
    def home(): return "OK", 200

    @app.route("/callback", methods=["GET", "POST"])
    def callback():
        if request.method != "POST":
            return "OK", 200

        body = request.get_data(as_text=True)

        # 번역 실패와 관계없이 항상 200 (LINE 재전송 방지)
        try:
            pipeline.handle_delivery(body)
        except Exception:
            logger.exception("웹훅 처리 오류")
        return "OK", 200

    return app


if __name__ == "__main__":
    settings = load_settings()
    create_app(settings).run(host="0.0.0.0", port=settings.port)
