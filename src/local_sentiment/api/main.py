from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .routes import location, local_sentiment
from .routes.location import get_resolver
from local_sentiment.location_resolver import LocationResolver
from .scheduler import lifespan_scheduler
from .logging_config import setup_logging
from .response import success_response

# 配置日志
setup_logging()

app = FastAPI(
    title="Local Sentiment API",
    description="地点识别与城市日情感汇总接口",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan_scheduler  # 集成每日聚合调度器
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(location.router)
app.include_router(local_sentiment.router)


@app.get("/")
async def root():
    """API 根路径"""
    return success_response(
        data={
            "message": "Local Sentiment API",
            "docs": "/docs",
            "endpoints": {
                "detect_location": "POST /api/location/detect",
                "enhance_location": "POST /api/location/enhance",
                "generate": "POST /api/local-sentiment/generate",
                "rollups": "GET /api/local-sentiment?days=7&region=Littoral"
            },
            "scheduler": {
                "aggregation": "每天聚合前一个自然日的数据"
            }
        }
    )


@app.get("/health")
def health_check(resolver: LocationResolver = Depends(get_resolver)):
    """健康检查端点，附带当前地名词典的规模"""
    return success_response(data={
        "status": "healthy",
        "gazetteer": resolver.gazetteer.get_stats()
    })
