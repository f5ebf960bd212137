from antler.framework import FunctionSet, function, function_set


@function_set("sample")
class SampleFunctions(FunctionSet):
    @function("double")
    def double(self, value: int) -> int:
        return value * 2

    @function("project-name")
    def project_name(self) -> str:
        return self.project.name
