from scholarship_portal.main import app

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("scholarship_portal.main:app", host="0.0.0.0", port=8000, reload=True)
