"""Engine-agnostic building blocks: rules, transcoding, configuration, errors."""
