"""mvnext — add the Gradle Enterprise Maven extension to Maven projects."""

__version__ = "0.1.0"
