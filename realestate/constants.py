FLOORS_COLLECTION = "floors"
APARTMENTS_COLLECTION = "apartments"
BUYERS_COLLECTION = "buyers"
PICTURES_COLLECTION = "pictures"
USERS_COLLECTION = "users"

REQUIRED_COLLECTIONS = (
    FLOORS_COLLECTION,
    APARTMENTS_COLLECTION,
    BUYERS_COLLECTION,
    PICTURES_COLLECTION,
    USERS_COLLECTION,
)

# Placeholder document written while probing a missing collection.
INITIALIZATION_DOC_ID = "initialization"

FLOOR_IMAGE_PREFIX = "floors"
# Extensions listed as floor images (signed URL listing).
FLOOR_IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".webp")
# Extensions reported as images in the detailed listing.
IMAGE_EXTENSIONS = FLOOR_IMAGE_EXTENSIONS + (".gif", ".bmp")

MODELS_FOLDER = "models"
IMAGES_FOLDER = "images"
MODEL_MEDIA_TYPE = "3d"

PUBLIC_STORAGE_BASE_URL = "https://storage.googleapis.com"
