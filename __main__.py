import pulumi
from awsaiml.builder import AIMLResourceBuilder
from awsaiml.config import config_file, load_config
from awsaiml.errors import ModuleError

def main():
    # Load YAML configuration
    config = load_config(config_file())

    builder = AIMLResourceBuilder(config)
    try:
        builder.build()
    except ModuleError as e:
        pulumi.log.error(f"Failed during resource build: {e}")
        raise

    # Export module outputs; unselected variants have nothing to export
    for module_name, outputs in builder.outputs.items():
        for key, value in outputs.items():
            if value is None:
                continue
            pulumi.export(f"{module_name}.{key}", value)

if __name__ == "__main__":
    main()
