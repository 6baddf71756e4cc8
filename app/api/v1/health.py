from fastapi import APIRouter

router = APIRouter()
root_router = APIRouter()


@root_router.get("/", summary="Service Info", description="Static message confirming the server is up.")
async def root():
    return {"message": "Resume analyzer API is running. POST a resume to /resume/upload."}


@router.get("/health", summary="Health Check", description="Check the health status of the application.")
async def health_check():
    return {"status": "healthy"}
