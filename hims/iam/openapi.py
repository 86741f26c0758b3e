from drf_spectacular.extensions import OpenApiAuthenticationExtension


class BearerJWTAuthenticationScheme(OpenApiAuthenticationExtension):
    target_class = "hims.iam.auth.BearerJWTAuthentication"
    name = "BearerJWT"

    def get_security_definition(self, auto_schema):
        return {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
            "description": "Send the access token via `Authorization: Bearer <token>`.",
        }
